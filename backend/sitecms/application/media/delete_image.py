# sitecms/application/media/delete_image.py
from sitecms.application.exceptions import ImageNotFound, InvalidImageKey
from sitecms.extensions import storage
from sitecms.storage.keys import IMAGES_PREFIX
from sitecms.storage.objects import soft_delete
from sitecms.utils.audit import log_action


def delete_image(*, key: str) -> str:
    """
    Soft-delete an image into the trash prefix.

    Trash is never purged; restoring is a manual bucket operation.
    """
    if not key.startswith(f"{IMAGES_PREFIX}/"):
        raise InvalidImageKey()

    try:
        trash_key = soft_delete(storage.bucket, key)
    except FileNotFoundError as exc:
        raise ImageNotFound() from exc

    log_action(
        action="image.delete",
        entity_type="image",
        entity_id=key,
        payload={"trash_key": trash_key},
    )
    return trash_key
