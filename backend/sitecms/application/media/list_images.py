# sitecms/application/media/list_images.py
from typing import List, Optional

from sitecms.domain.invariants.image import ALLOWED_IMAGE_MIME_TYPES
from sitecms.extensions import storage
from sitecms.storage.base import ObjectInfo
from sitecms.storage.keys import IMAGES_PREFIX


def list_images(*, folder: Optional[str] = None) -> List[ObjectInfo]:
    """Walk every listing page under the folder, keeping image objects only."""
    store = storage.bucket
    prefix = f"{(folder or IMAGES_PREFIX).rstrip('/')}/"

    images: List[ObjectInfo] = []
    cursor = None
    while True:
        listing = store.list(prefix, cursor=cursor)
        images.extend(
            obj for obj in listing.objects if obj.content_type in ALLOWED_IMAGE_MIME_TYPES
        )
        if not listing.truncated:
            break
        cursor = listing.cursor

    return images


def list_image_folders() -> List[str]:
    listing = storage.bucket.list(f"{IMAGES_PREFIX}/", delimiter="/")
    return [prefix.rstrip("/") for prefix in listing.prefixes]
