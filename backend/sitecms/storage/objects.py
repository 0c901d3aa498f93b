# sitecms/storage/objects.py
"""Composite operations built on the bucket primitives."""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

from .base import ObjectInfo, ObjectStore
from .keys import trash_key

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
JSON_CACHE_CONTROL = "no-cache"


def read_json(store: ObjectStore, key: str) -> Optional[Any]:
    stored = store.get(key)
    if stored is None:
        return None
    return stored.json()


def write_json(store: ObjectStore, key: str, data: Any) -> ObjectInfo:
    body = json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")
    return store.put(
        key,
        body,
        content_type=JSON_CONTENT_TYPE,
        cache_control=JSON_CACHE_CONTROL,
    )


def exists(store: ObjectStore, key: str) -> bool:
    return store.head(key) is not None


def copy_object(store: ObjectStore, source_key: str, destination_key: str) -> Optional[ObjectInfo]:
    """
    Copy raw bytes and HTTP/custom metadata between keys.

    Returns None when the source object is missing.
    """
    source = store.get(source_key)
    if source is None:
        return None

    return store.put(
        destination_key,
        source.body,
        content_type=source.content_type,
        cache_control=source.cache_control,
        metadata=dict(source.metadata),
    )


def soft_delete(store: ObjectStore, key: str) -> str:
    """
    Move an object into the trash prefix.

    Raises FileNotFoundError if the object does not exist.
    """
    source = store.get(key)
    if source is None:
        raise FileNotFoundError(f"File not found: {key}")

    destination = trash_key(key, int(time.time() * 1000))
    metadata = dict(source.metadata)
    metadata["originalKey"] = key
    metadata["deletedAt"] = datetime.now(timezone.utc).isoformat(timespec="milliseconds")

    store.put(
        destination,
        source.body,
        content_type=source.content_type,
        cache_control=source.cache_control,
        metadata=metadata,
    )
    store.delete(key)
    logger.info("Moved %s to %s.", key, destination)
    return destination
