import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil.parser import isoparse

from sitecms.models.version import VersionIndex
from sitecms.storage.base import ObjectStore
from sitecms.storage.keys import version_index_key
from sitecms.storage.objects import read_json, write_json

MAX_VERSIONS_PER_SECTION = 10

VERSION_ID_FORMAT = "%Y-%m-%dT%H-%M-%S"
VERSION_ID_RE = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}")
_TIME_PART_RE = re.compile(r"-(\d{2})-(\d{2})$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_version_id(moment: Optional[datetime] = None) -> str:
    """
    Version ids look like 2024-05-01T13-45-09: UTC, second precision,
    colons replaced so the id is a safe key segment. Lexical order equals
    chronological order.
    """
    moment = moment or utcnow()
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(VERSION_ID_FORMAT)


def is_version_id(value) -> bool:
    return isinstance(value, str) and bool(VERSION_ID_RE.fullmatch(value))


def parse_version_id(version_id: str) -> datetime:
    if not is_version_id(version_id):
        raise ValueError(f"Invalid version id: {version_id}")
    iso = _TIME_PART_RE.sub(r":\1:\2", version_id)
    return isoparse(iso).replace(tzinfo=timezone.utc)


def next_version_id(moment: datetime, newest_id: Optional[str] = None) -> str:
    """
    Id for a new version that sorts after newest_id.

    Two versions created within the same second would collide, so the
    timestamp is moved one second past the newest existing id instead.
    """
    version_id = generate_version_id(moment)
    if newest_id is not None and version_id <= newest_id:
        version_id = generate_version_id(parse_version_id(newest_id) + timedelta(seconds=1))
    return version_id


def iso_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def load_version_index(store: ObjectStore, section: str) -> Optional[VersionIndex]:
    data = read_json(store, version_index_key(section))
    if data is None:
        return None
    return VersionIndex.from_dict(data)


def save_version_index(store: ObjectStore, index: VersionIndex) -> None:
    write_json(store, version_index_key(index.section), index.to_dict())
