# sitecms/storage/base.py
"""Object store contract shared by every bucket backend."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union


class StorageError(Exception):
    """Raised when the backing bucket fails an operation."""


@dataclass(frozen=True)
class ObjectInfo:
    key: str
    size: int
    etag: str = ""
    uploaded: Optional[datetime] = None
    content_type: Optional[str] = None
    cache_control: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class StoredObject(ObjectInfo):
    body: bytes = b""

    def text(self) -> str:
        return self.body.decode("utf-8")

    def json(self) -> Any:
        return json.loads(self.body)


@dataclass(frozen=True)
class ObjectListing:
    objects: List[ObjectInfo]
    truncated: bool = False
    cursor: Optional[str] = None
    prefixes: List[str] = field(default_factory=list)


class ObjectStore(Protocol):
    """Subset of bucket operations the CMS relies on."""

    def get(self, key: str) -> Optional[StoredObject]:
        ...

    def put(
        self,
        key: str,
        body: bytes,
        *,
        content_type: Optional[str] = None,
        cache_control: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> ObjectInfo:
        ...

    def delete(self, keys: Union[str, Sequence[str]]) -> None:
        ...

    def list(
        self,
        prefix: str = "",
        *,
        cursor: Optional[str] = None,
        delimiter: Optional[str] = None,
        limit: int = 1000,
    ) -> ObjectListing:
        ...

    def head(self, key: str) -> Optional[ObjectInfo]:
        ...


__all__ = ["ObjectInfo", "ObjectListing", "ObjectStore", "StorageError", "StoredObject"]
