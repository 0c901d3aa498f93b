# sitecms/storage/memory.py
"""In-process bucket used by the testing config."""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone
from typing import Dict, Optional, Sequence, Union

from .base import ObjectInfo, ObjectListing, StoredObject

logger = logging.getLogger(__name__)


class MemoryObjectStore:
    """Dictionary-backed store with the same listing semantics as S3."""

    def __init__(self) -> None:
        self._objects: Dict[str, StoredObject] = {}

    def get(self, key: str) -> Optional[StoredObject]:
        return self._objects.get(key)

    def put(
        self,
        key: str,
        body: bytes,
        *,
        content_type: Optional[str] = None,
        cache_control: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> ObjectInfo:
        data = bytes(body)
        stored = StoredObject(
            key=key,
            size=len(data),
            etag=hashlib.md5(data).hexdigest(),
            uploaded=datetime.now(timezone.utc),
            content_type=content_type,
            cache_control=cache_control,
            metadata=dict(metadata or {}),
            body=data,
        )
        self._objects[key] = stored
        logger.debug("Stored %s (%d bytes) in memory bucket.", key, stored.size)
        return _info(stored)

    def delete(self, keys: Union[str, Sequence[str]]) -> None:
        if isinstance(keys, str):
            keys = [keys]
        for key in keys:
            self._objects.pop(key, None)

    def list(
        self,
        prefix: str = "",
        *,
        cursor: Optional[str] = None,
        delimiter: Optional[str] = None,
        limit: int = 1000,
    ) -> ObjectListing:
        objects = []
        prefixes = []
        truncated = False
        last_key = None

        for key in sorted(self._objects):
            if not key.startswith(prefix):
                continue
            if cursor is not None and key <= cursor:
                continue

            if delimiter:
                rest = key[len(prefix):]
                if delimiter in rest:
                    common = prefix + rest.split(delimiter, 1)[0] + delimiter
                    if common not in prefixes:
                        prefixes.append(common)
                    continue

            if len(objects) >= limit:
                truncated = True
                break
            objects.append(_info(self._objects[key]))
            last_key = key

        return ObjectListing(
            objects=objects,
            truncated=truncated,
            cursor=last_key if truncated else None,
            prefixes=prefixes,
        )

    def head(self, key: str) -> Optional[ObjectInfo]:
        stored = self._objects.get(key)
        return _info(stored) if stored else None

    def keys(self):
        return sorted(self._objects)


def _info(stored: StoredObject) -> ObjectInfo:
    return ObjectInfo(
        key=stored.key,
        size=stored.size,
        etag=stored.etag,
        uploaded=stored.uploaded,
        content_type=stored.content_type,
        cache_control=stored.cache_control,
        metadata=dict(stored.metadata),
    )


__all__ = ["MemoryObjectStore"]
