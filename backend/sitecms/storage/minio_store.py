# sitecms/storage/minio_store.py
"""S3-compatible bucket backend (Cloudflare R2, MinIO, AWS S3)."""

from __future__ import annotations

import io
import logging
import mimetypes
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from dateutil.parser import parse as parse_http_date
from minio import Minio
from minio.deleteobjects import DeleteObject
from minio.error import MinioException, S3Error
from urllib3.exceptions import HTTPError

from .base import ObjectInfo, ObjectListing, StorageError, StoredObject

logger = logging.getLogger(__name__)

MISSING_KEY_CODES = {"NoSuchKey", "NoSuchObject", "ResourceNotFound"}
USER_METADATA_PREFIX = "x-amz-meta-"


class MinioObjectStore:
    """Bucket adapter backed by the ``minio`` client."""

    def __init__(
        self,
        bucket: str,
        *,
        endpoint: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        secure: bool = True,
        region: Optional[str] = None,
        client: Any = None,
    ) -> None:
        if client is None:
            if not (endpoint and access_key and secret_key):
                raise StorageError("Storage endpoint and credentials are required")
            client = Minio(
                endpoint,
                access_key=access_key,
                secret_key=secret_key,
                secure=secure,
                region=region,
            )
            logger.info("MinIO client initialised for %s.", endpoint)
        self._client = client
        self.bucket = bucket

    def get(self, key: str) -> Optional[StoredObject]:
        response = None
        try:
            response = self._client.get_object(bucket_name=self.bucket, object_name=key)
            body = response.read()
            headers = response.headers
        except S3Error as exc:
            if exc.code in MISSING_KEY_CODES:
                return None
            raise StorageError(f"Failed to read {key}: {exc}") from exc
        except (MinioException, HTTPError) as exc:
            raise StorageError(f"Failed to read {key}: {exc}") from exc
        finally:
            if response is not None:
                response.close()
                response.release_conn()

        content_type, cache_control, metadata = _split_headers(headers)
        return StoredObject(
            key=key,
            size=len(body),
            etag=(headers.get("ETag") or "").strip('"'),
            uploaded=_parse_last_modified(headers.get("Last-Modified")),
            content_type=content_type,
            cache_control=cache_control,
            metadata=metadata,
            body=body,
        )

    def put(
        self,
        key: str,
        body: bytes,
        *,
        content_type: Optional[str] = None,
        cache_control: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> ObjectInfo:
        headers: Dict[str, str] = dict(metadata or {})
        if cache_control:
            headers["Cache-Control"] = cache_control
        detected_type = content_type or mimetypes.guess_type(key)[0] or "application/octet-stream"

        try:
            result = self._client.put_object(
                bucket_name=self.bucket,
                object_name=key,
                data=io.BytesIO(body),
                length=len(body),
                content_type=detected_type,
                metadata=headers or None,
            )
        except (MinioException, HTTPError) as exc:
            logger.error("MinIO upload of %s failed: %s", key, exc, exc_info=True)
            raise StorageError(f"Failed to write {key}: {exc}") from exc

        return ObjectInfo(
            key=key,
            size=len(body),
            etag=(getattr(result, "etag", None) or "").strip('"'),
            uploaded=getattr(result, "last_modified", None) or datetime.now(timezone.utc),
            content_type=detected_type,
            cache_control=cache_control,
            metadata=dict(metadata or {}),
        )

    def delete(self, keys: Union[str, Sequence[str]]) -> None:
        try:
            if isinstance(keys, str):
                self._client.remove_object(bucket_name=self.bucket, object_name=keys)
                return

            errors = self._client.remove_objects(
                bucket_name=self.bucket,
                delete_object_list=[DeleteObject(name=key) for key in keys],
            )
            failed = [error.name for error in errors]
        except (MinioException, HTTPError) as exc:
            raise StorageError(f"Failed to delete {keys}: {exc}") from exc

        if failed:
            raise StorageError(f"Failed to delete {', '.join(failed)}")

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

        try:
            listing = self._client.list_objects(
                bucket_name=self.bucket,
                prefix=prefix or None,
                recursive=not delimiter,
                start_after=cursor,
                include_user_meta=True,
            )
            for item in listing:
                if item.is_dir:
                    prefixes.append(item.object_name)
                    continue
                if len(objects) >= limit:
                    truncated = True
                    break
                objects.append(
                    ObjectInfo(
                        key=item.object_name,
                        size=item.size or 0,
                        etag=(item.etag or "").strip('"'),
                        uploaded=item.last_modified,
                        content_type=item.content_type
                        or mimetypes.guess_type(item.object_name)[0],
                    )
                )
        except (MinioException, HTTPError) as exc:
            raise StorageError(f"Failed to list {prefix}: {exc}") from exc

        return ObjectListing(
            objects=objects,
            truncated=truncated,
            cursor=objects[-1].key if truncated else None,
            prefixes=prefixes,
        )

    def head(self, key: str) -> Optional[ObjectInfo]:
        try:
            stat = self._client.stat_object(bucket_name=self.bucket, object_name=key)
        except S3Error as exc:
            if exc.code in MISSING_KEY_CODES:
                return None
            raise StorageError(f"Failed to stat {key}: {exc}") from exc
        except (MinioException, HTTPError) as exc:
            raise StorageError(f"Failed to stat {key}: {exc}") from exc

        _, cache_control, metadata = _split_headers(stat.metadata or {})
        return ObjectInfo(
            key=key,
            size=stat.size or 0,
            etag=(stat.etag or "").strip('"'),
            uploaded=stat.last_modified,
            content_type=stat.content_type,
            cache_control=cache_control,
            metadata=metadata,
        )


def _split_headers(
    headers: Mapping[str, str],
) -> Tuple[Optional[str], Optional[str], Dict[str, str]]:
    content_type = None
    cache_control = None
    metadata: Dict[str, str] = {}
    for name, value in headers.items():
        lowered = name.lower()
        if lowered == "content-type":
            content_type = value
        elif lowered == "cache-control":
            cache_control = value
        elif lowered.startswith(USER_METADATA_PREFIX):
            metadata[lowered[len(USER_METADATA_PREFIX):]] = value
    return content_type, cache_control, metadata


def _parse_last_modified(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return parse_http_date(value)
    except (ValueError, OverflowError):
        logger.warning("Unparseable Last-Modified header: %s", value)
        return None


__all__ = ["MinioObjectStore"]
