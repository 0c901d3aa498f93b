from typing import List

from .exceptions import ContentValidationError

ALLOWED_IMAGE_MIME_TYPES = ("image/jpeg", "image/png", "image/webp", "image/svg+xml")
ALLOWED_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".svg")
DEFAULT_MAX_IMAGE_SIZE_BYTES = 10 * 1024 * 1024

INVALID_IMAGE_TYPE = (
    f"Invalid image type. Allowed: {', '.join(ALLOWED_IMAGE_EXTENSIONS)}"
)


def image_errors(
    *,
    size: int,
    content_type: str,
    filename: str,
    max_size: int = DEFAULT_MAX_IMAGE_SIZE_BYTES,
) -> List[str]:
    errors = []

    if size > max_size:
        errors.append(f"Image exceeds maximum size of {max_size / 1024 / 1024:g}MB")

    ext = "." + filename.rsplit(".", 1)[1].lower() if "." in filename else ""
    if content_type not in ALLOWED_IMAGE_MIME_TYPES or ext not in ALLOWED_IMAGE_EXTENSIONS:
        errors.append(INVALID_IMAGE_TYPE)

    return errors


def assert_image(**kwargs) -> None:
    errors = image_errors(**kwargs)
    if errors:
        raise ContentValidationError(errors, "Image validation failed")
