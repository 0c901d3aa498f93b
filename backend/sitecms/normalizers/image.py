# sitecms/normalizers/image.py
from sitecms.utils.media import public_url


def normalize_image(obj):
    return {
        "key": obj.key,
        "url": public_url(obj.key),
        "size": obj.size,
        "last_modified": obj.uploaded.isoformat() if obj.uploaded else None,
        "content_type": obj.content_type,
    }
