from flask import Blueprint

v1_bp = Blueprint("v1", __name__)

# Route modules register themselves on import
from . import health, content, admin, media  # noqa: E402,F401
