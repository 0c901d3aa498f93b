# sitecms/application/cms/read_content.py
from typing import Any, Dict, Optional

from sitecms.domain.sections import CONTENT_SECTIONS
from sitecms.extensions import storage
from sitecms.storage.keys import content_key
from sitecms.storage.objects import read_json


def get_content(*, section: str) -> Optional[Any]:
    return read_json(storage.bucket, content_key(section))


def get_all_content() -> Dict[str, Optional[Any]]:
    return {section: get_content(section=section) for section in CONTENT_SECTIONS}
