# sitecms/normalizers/version.py
from typing import Any, Dict, Optional

from sitecms.models.version import VersionEntry
from sitecms.utils.versioning import parse_version_id


def normalize_version(entry: VersionEntry) -> Dict[str, Any]:
    """
    Normalizes a VersionEntry into API-safe JSON.

    snapshot_at is recovered from the id itself (second precision) and is
    what the admin version list displays; None for ids that do not parse.
    """
    return {
        "id": entry.id,
        "created_at": entry.created_at,
        "created_by": entry.created_by,
        "size": entry.size,
        "note": entry.note,
        "snapshot_at": _snapshot_at(entry.id),
    }


def _snapshot_at(version_id: str) -> Optional[str]:
    try:
        return parse_version_id(version_id).isoformat()
    except ValueError:
        return None
