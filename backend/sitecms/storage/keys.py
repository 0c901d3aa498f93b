# sitecms/storage/keys.py
"""Bucket key layout.

    content/{section}.json                  current document
    _versions/{section}/_index.json         version index
    _versions/{section}/{version_id}.json   version snapshot
    images/{folder}/{ms}-{filename}         uploaded image
    _trash/{ms}-{original-key}              soft-deleted image
"""

CONTENT_PREFIX = "content"
VERSIONS_PREFIX = "_versions"
IMAGES_PREFIX = "images"
TRASH_PREFIX = "_trash"


def content_key(section: str) -> str:
    return f"{CONTENT_PREFIX}/{section}.json"


def version_key(section: str, version_id: str) -> str:
    return f"{VERSIONS_PREFIX}/{section}/{version_id}.json"


def version_index_key(section: str) -> str:
    return f"{VERSIONS_PREFIX}/{section}/_index.json"


def trash_key(original_key: str, timestamp_ms: int) -> str:
    return f"{TRASH_PREFIX}/{timestamp_ms}-{original_key.replace('/', '-')}"
