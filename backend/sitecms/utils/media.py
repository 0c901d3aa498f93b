import re
import time
from typing import Optional

from flask import current_app
from werkzeug.utils import secure_filename

_UNSAFE_CHARS = re.compile(r"[^a-z0-9.-]")
_DASH_RUNS = re.compile(r"-+")


def sanitize_filename(filename: str) -> str:
    """Lowercase key-safe filename: anything outside [a-z0-9.-] becomes '-'."""
    name = secure_filename(filename) or filename
    name = _UNSAFE_CHARS.sub("-", name.lower())
    return _DASH_RUNS.sub("-", name)


def generate_image_key(folder: str, filename: str, timestamp_ms: Optional[int] = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{folder}/{timestamp_ms}-{sanitize_filename(filename)}"


def public_url(key: str) -> str:
    base_url = current_app.config.get("PUBLIC_ASSET_URL", "")
    if not base_url:
        current_app.logger.warning("PUBLIC_ASSET_URL is not configured")
    return f"{base_url.rstrip('/')}/{key}"
