# sitecms/domain/invariants/content.py
"""
Structural rules for each section's document.

Every collector returns the full list of problems so the admin form can
show them all at once; assert_content raises when the list is non-empty.
"""
from __future__ import annotations

import json
import math
import re
from typing import Any, Callable, Dict, List
from urllib.parse import urlparse

from .exceptions import ContentValidationError

MAX_GALLERY_PROJECTS = 50
MAX_CLIENT_LOGOS = 30
MAX_HERO_BACKGROUND_IMAGES = 4
DEFAULT_MAX_JSON_SIZE_BYTES = 1 * 1024 * 1024

HEX_COLOR_RE = re.compile(r"^#([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


# -------------------------------------------------
# Field checks
# -------------------------------------------------
def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_non_negative_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value) and value >= 0


def is_valid_url(value: Any) -> bool:
    """Absolute URL or a root-relative path."""
    if not isinstance(value, str):
        return False
    if value.startswith("/"):
        return True
    parsed = urlparse(value)
    return bool(parsed.scheme and (parsed.netloc or parsed.path))


def is_optional_url(value: Any) -> bool:
    if value is None or value == "":
        return True
    return is_valid_url(value)


def is_valid_hex_color(value: Any) -> bool:
    return isinstance(value, str) and bool(HEX_COLOR_RE.match(value))


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and bool(EMAIL_RE.match(value))


def json_size(content: Any) -> int:
    return len(
        json.dumps(content, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    )


def _require_strings(data: Dict[str, Any], fields, prefix: str = "") -> List[str]:
    return [
        f"{prefix}{field} is required"
        for field in fields
        if not is_non_empty_string(data.get(field))
    ]


def _items(data: Dict[str, Any], field: str, errors: List[str]):
    """Yield (index, item) for a list field, recording shape errors."""
    value = data.get(field)
    if not isinstance(value, list):
        errors.append(f"{field} must be an array")
        return
    for i, item in enumerate(value):
        if not isinstance(item, dict):
            errors.append(f"{field}[{i}] must be an object")
            continue
        yield i, item


# -------------------------------------------------
# Sections
# -------------------------------------------------
def hero_errors(hero: Dict[str, Any]) -> List[str]:
    errors: List[str] = []

    title = hero.get("title")
    if not isinstance(title, dict):
        errors.append("title is required and must be an object")
    else:
        errors += _require_strings(title, ("line1", "line2", "line3", "line4"), "title.")

    errors += _require_strings(hero, ("subtitle", "ctaButton"))

    images = hero.get("backgroundImages")
    if not isinstance(images, list):
        errors.append("backgroundImages must be an array")
    else:
        if len(images) > MAX_HERO_BACKGROUND_IMAGES:
            errors.append(
                f"Maximum of {MAX_HERO_BACKGROUND_IMAGES} hero background images allowed"
            )
        for i, image in enumerate(images):
            if not is_valid_url(image):
                errors.append(f"backgroundImages[{i}] must be a valid URL")

    for i, service in _items(hero, "services", errors):
        errors += _require_strings(service, ("id", "title", "description"), f"services[{i}].")
        if not is_valid_url(service.get("icon")):
            errors.append(f"services[{i}].icon must be a valid URL")
        if not is_valid_hex_color(service.get("color")):
            errors.append(f"services[{i}].color must be a valid hex color")

    return errors


def about_errors(about: Dict[str, Any]) -> List[str]:
    errors = _require_strings(about, ("title", "description"))

    for i, stat in _items(about, "stats", errors):
        if not is_non_empty_string(stat.get("id")):
            errors.append(f"stats[{i}].id is required")
        if not is_non_negative_number(stat.get("value")):
            errors.append(f"stats[{i}].value must be a non-negative number")
        if not isinstance(stat.get("suffix"), str):
            errors.append(f"stats[{i}].suffix is required")
        if not is_non_empty_string(stat.get("label")):
            errors.append(f"stats[{i}].label is required")

    return errors


def gallery_errors(gallery: Dict[str, Any]) -> List[str]:
    errors = _require_strings(gallery, ("title", "subtitle", "description"))

    projects = gallery.get("projects")
    if isinstance(projects, list) and len(projects) > MAX_GALLERY_PROJECTS:
        errors.append(f"Maximum of {MAX_GALLERY_PROJECTS} gallery projects allowed")

    for i, project in _items(gallery, "projects", errors):
        errors += _require_strings(project, ("id", "title", "tag"), f"projects[{i}].")
        if not is_valid_url(project.get("image")):
            errors.append(f"projects[{i}].image must be a valid URL")
        if not is_optional_url(project.get("link")):
            errors.append(f"projects[{i}].link must be a valid URL if provided")

    return errors


def clients_errors(clients: Dict[str, Any]) -> List[str]:
    errors = _require_strings(clients, ("title",))

    logos = clients.get("clients")
    if isinstance(logos, list) and len(logos) > MAX_CLIENT_LOGOS:
        errors.append(f"Maximum of {MAX_CLIENT_LOGOS} client logos allowed")

    for i, client in _items(clients, "clients", errors):
        errors += _require_strings(client, ("id", "name"), f"clients[{i}].")
        if not is_valid_url(client.get("logo")):
            errors.append(f"clients[{i}].logo must be a valid URL")

    return errors


def footer_errors(footer: Dict[str, Any]) -> List[str]:
    errors = _require_strings(footer, ("ctaTitle", "phone"))

    if not is_valid_email(footer.get("email")):
        errors.append("email must be a valid email address")

    address = footer.get("address")
    if not isinstance(address, dict):
        errors.append("address is required and must be an object")
    else:
        errors += _require_strings(address, ("line1", "line2"), "address.")

    social = footer.get("socialLinks")
    if not isinstance(social, dict):
        errors.append("socialLinks is required and must be an object")
    else:
        for network in ("facebook", "instagram", "linkedin"):
            if not is_optional_url(social.get(network)):
                errors.append(f"socialLinks.{network} must be a valid URL if provided")

    errors += _require_strings(footer, ("tagline", "newsletterTitle", "newsletterButtonText"))
    return errors


def metadata_errors(metadata: Dict[str, Any]) -> List[str]:
    errors = _require_strings(metadata, ("siteName", "seoTitle", "seoDescription"))
    if not is_valid_url(metadata.get("ogImage")):
        errors.append("ogImage must be a valid URL")
    return errors


SECTION_VALIDATORS: Dict[str, Callable[[Dict[str, Any]], List[str]]] = {
    "hero": hero_errors,
    "about": about_errors,
    "gallery": gallery_errors,
    "clients": clients_errors,
    "footer": footer_errors,
    "metadata": metadata_errors,
}


def content_errors(
    section: str,
    content: Any,
    *,
    max_json_size: int = DEFAULT_MAX_JSON_SIZE_BYTES,
) -> List[str]:
    validator = SECTION_VALIDATORS.get(section)
    if validator is None:
        return ["Invalid content section"]

    if not isinstance(content, dict):
        return ["Content must be an object"]

    errors = validator(content)

    if json_size(content) > max_json_size:
        errors.append(
            f"Content exceeds maximum size of {max_json_size / 1024 / 1024:g}MB"
        )

    return errors


def assert_content(
    section: str,
    content: Any,
    *,
    max_json_size: int = DEFAULT_MAX_JSON_SIZE_BYTES,
) -> None:
    errors = content_errors(section, content, max_json_size=max_json_size)
    if errors:
        raise ContentValidationError(errors)
