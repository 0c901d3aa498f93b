from typing import Tuple

# Fixed content areas of the site; one current document each.
CONTENT_SECTIONS: Tuple[str, ...] = (
    "hero",
    "about",
    "gallery",
    "clients",
    "footer",
    "metadata",
)

IMAGE_FOLDERS: Tuple[str, ...] = (
    "images/hero",
    "images/gallery",
    "images/clients",
    "images/general",
)


def is_valid_section(section: str) -> bool:
    return section in CONTENT_SECTIONS
