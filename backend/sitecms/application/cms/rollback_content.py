# sitecms/application/cms/rollback_content.py
from typing import Dict, Optional

from sitecms.application.cms.create_version import create_version
from sitecms.application.exceptions import VersionNotFound, WriteFailed
from sitecms.extensions import storage
from sitecms.storage.base import StorageError
from sitecms.storage.keys import content_key, version_key
from sitecms.utils.audit import log_action
from sitecms.utils.versioning import MAX_VERSIONS_PER_SECTION, is_version_id


def rollback_to_version(
    *,
    section: str,
    version_id: str,
    editor: str,
    note: Optional[str] = None,
    max_versions: int = MAX_VERSIONS_PER_SECTION,
) -> Dict[str, Optional[str]]:
    """
    Restore a section to a previous version.

    Flow:
    - Verify the snapshot exists (VersionNotFound, nothing mutated)
    - Back up the live document as a new version (failure is fatal)
    - Copy the snapshot bytes over the current document
    """
    # Only well-formed ids address snapshot blobs; anything else (the
    # index key included) is unknown
    if not is_version_id(version_id):
        raise VersionNotFound()

    store = storage.bucket

    # 1️⃣ Target must exist; its bytes are held so the backup's eviction
    # cannot remove them before the restore
    target = store.get(version_key(section, version_id))
    if target is None:
        raise VersionNotFound()

    # 2️⃣ Mandatory backup of what is live now
    backup_version_id = create_version(
        section=section,
        editor=editor,
        note=note if note is not None else f"Rollback to version {version_id}",
        max_versions=max_versions,
    )

    # 3️⃣ Byte-for-byte restore
    try:
        store.put(
            content_key(section),
            target.body,
            content_type=target.content_type,
            cache_control=target.cache_control,
            metadata=dict(target.metadata),
        )
    except StorageError as exc:
        raise WriteFailed(f"Failed to rollback to version: {exc}") from exc

    log_action(
        action="content.rollback",
        entity_type="section",
        entity_id=section,
        payload={
            "restored_version": version_id,
            "backup_version": backup_version_id,
        },
    )

    return {
        "restored_version_id": version_id,
        "backup_version_id": backup_version_id,
    }
