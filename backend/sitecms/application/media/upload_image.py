# sitecms/application/media/upload_image.py
from typing import Any, Dict

from flask import current_app

from sitecms.domain.invariants.exceptions import ContentValidationError
from sitecms.domain.invariants.image import assert_image
from sitecms.domain.sections import IMAGE_FOLDERS
from sitecms.extensions import storage
from sitecms.utils.audit import log_action
from sitecms.utils.media import generate_image_key, public_url


def upload_image(
    *,
    folder: str,
    filename: str,
    content_type: str,
    data: bytes,
) -> Dict[str, Any]:
    """Validate and store an image under its folder with immutable caching."""
    if folder not in IMAGE_FOLDERS:
        raise ContentValidationError(
            [f"folder must be one of: {', '.join(IMAGE_FOLDERS)}"], "Invalid folder"
        )

    assert_image(
        size=len(data),
        content_type=content_type,
        filename=filename,
        max_size=current_app.config["MAX_IMAGE_SIZE_BYTES"],
    )

    key = generate_image_key(folder, filename)
    ttl = current_app.config["IMAGE_CACHE_TTL_SECONDS"]

    storage.bucket.put(
        key,
        data,
        content_type=content_type,
        cache_control=f"public, max-age={ttl}, immutable",
    )

    log_action(
        action="image.upload",
        entity_type="image",
        entity_id=key,
        payload={"size": len(data), "content_type": content_type},
    )

    return {
        "url": public_url(key),
        "key": key,
        "size": len(data),
        "content_type": content_type,
    }
