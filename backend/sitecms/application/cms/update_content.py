# sitecms/application/cms/update_content.py
from typing import Any, Dict

from flask import current_app

from sitecms.application.cms.create_version import create_version
from sitecms.application.exceptions import SnapshotFailed, WriteFailed
from sitecms.extensions import storage
from sitecms.storage.base import StorageError
from sitecms.storage.keys import content_key
from sitecms.storage.objects import write_json
from sitecms.utils.audit import log_action
from sitecms.utils.versioning import MAX_VERSIONS_PER_SECTION, iso_timestamp, utcnow


def update_content(
    *,
    section: str,
    document: Any,
    editor: str,
    max_versions: int = MAX_VERSIONS_PER_SECTION,
) -> Dict[str, Any]:
    """
    Replace a section's current document.

    Design rules:
    - The document is validated upstream; it is stored as-is
    - A snapshot of the previous document is attempted first
    - A failed snapshot is logged and does not block the edit
    - A failed overwrite fails the request; the old document stays live
    """
    version_id = None
    try:
        version_id = create_version(
            section=section,
            editor=editor,
            note="Content update",
            max_versions=max_versions,
        )
    except SnapshotFailed as exc:
        current_app.logger.error("Failed to create version backup for %s: %s", section, exc)

    try:
        write_json(storage.bucket, content_key(section), document)
    except StorageError as exc:
        raise WriteFailed(f"Failed to write {section} content: {exc}") from exc

    log_action(
        action="content.update",
        entity_type="section",
        entity_id=section,
        payload={"version_created": version_id},
    )

    return {
        "section": section,
        "updated_at": iso_timestamp(utcnow()),
        "updated_by": editor,
        "version_created": version_id,
    }
