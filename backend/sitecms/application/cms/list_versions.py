# sitecms/application/cms/list_versions.py
from typing import Any, List, Optional

from sitecms.application.exceptions import CorruptVersion
from sitecms.extensions import storage
from sitecms.models.version import VersionEntry, VersionIndex
from sitecms.storage.keys import version_key
from sitecms.storage.objects import read_json
from sitecms.utils.versioning import is_version_id, load_version_index, save_version_index


def get_version_index(*, section: str) -> VersionIndex:
    """Return the section's index, persisting an empty one on first access."""
    store = storage.bucket

    index = load_version_index(store, section)
    if index is not None:
        return index

    index = VersionIndex(section=section)
    save_version_index(store, index)
    return index


def list_versions(*, section: str) -> List[VersionEntry]:
    """Version entries, newest first."""
    return get_version_index(section=section).versions


def get_version_content(*, section: str, version_id: str) -> Optional[Any]:
    """Parsed snapshot of one version; None for unknown or malformed ids."""
    if not is_version_id(version_id):
        return None

    try:
        return read_json(storage.bucket, version_key(section, version_id))
    except ValueError as exc:
        raise CorruptVersion(f"Version {version_id} of {section} is not valid JSON") from exc
