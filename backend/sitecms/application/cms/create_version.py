# sitecms/application/cms/create_version.py
from typing import Optional

from flask import current_app

from sitecms.application.exceptions import SnapshotFailed
from sitecms.extensions import storage
from sitecms.models.version import VersionEntry, VersionIndex
from sitecms.storage.base import StorageError
from sitecms.storage.keys import content_key, version_key
from sitecms.storage.objects import copy_object
from sitecms.utils.versioning import (
    MAX_VERSIONS_PER_SECTION,
    iso_timestamp,
    load_version_index,
    next_version_id,
    save_version_index,
    utcnow,
)


def create_version(
    *,
    section: str,
    editor: str,
    note: Optional[str] = None,
    max_versions: int = MAX_VERSIONS_PER_SECTION,
) -> Optional[str]:
    """
    Snapshot the current document of a section before it is overwritten.

    Returns the new version id, or None when the section has no current
    document yet (nothing to snapshot).

    Guarantees:
    - the new entry is index[0]
    - the index never holds more than max_versions entries
    - on SnapshotFailed the persisted index is untouched
    - evicted snapshot blobs are deleted after the index is saved;
      a failed delete is logged and leaks the blob
    """
    store = storage.bucket
    current_key = content_key(section)

    try:
        current = store.head(current_key)
        if current is None:
            return None
        index = load_version_index(store, section) or VersionIndex(section=section)
    except StorageError as exc:
        raise SnapshotFailed(f"Failed to read current {section} content: {exc}") from exc

    now = utcnow()
    newest_id = index.versions[0].id if index.versions else None
    try:
        version_id = next_version_id(now, newest_id)
    except ValueError as exc:
        raise SnapshotFailed(f"Corrupt {section} version index: {exc}") from exc
    snapshot_key = version_key(section, version_id)

    # 1️⃣ Copy current bytes into the snapshot blob
    try:
        copied = copy_object(store, current_key, snapshot_key)
    except StorageError as exc:
        raise SnapshotFailed(f"Failed to copy content to version file: {exc}") from exc

    if copied is None:
        raise SnapshotFailed()

    # 2️⃣ Prepend entry and apply retention
    index.prepend(
        VersionEntry(
            id=version_id,
            created_at=iso_timestamp(now),
            created_by=editor,
            size=current.size,
            note=note,
        )
    )
    evicted = index.truncate(max_versions)

    # 3️⃣ Persist index
    try:
        save_version_index(store, index)
    except StorageError as exc:
        _discard_snapshot(store, snapshot_key)
        raise SnapshotFailed(f"Failed to save version index: {exc}") from exc

    # 4️⃣ Garbage-collect evicted snapshots
    if evicted:
        evicted_keys = [version_key(section, entry.id) for entry in evicted]
        try:
            store.delete(evicted_keys)
        except StorageError as exc:
            current_app.logger.warning(
                "Failed to delete evicted %s versions %s: %s",
                section,
                [entry.id for entry in evicted],
                exc,
            )

    current_app.logger.info(
        "Created %s version %s (%d bytes) for %s", section, version_id, current.size, editor
    )
    return version_id


def _discard_snapshot(store, snapshot_key):
    try:
        store.delete(snapshot_key)
    except StorageError as exc:
        current_app.logger.warning("Orphaned snapshot %s left behind: %s", snapshot_key, exc)
