import re
from functools import wraps
from flask import g, jsonify, make_response

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def admin_required(fn):
    """Rejects requests the access gate did not attach a valid email to."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        email = getattr(g, "current_user", None)
        if not email:
            return jsonify({
                "success": False,
                "error": "User email not found in request headers"
            }), 401

        if not EMAIL_RE.match(email):
            return jsonify({
                "success": False,
                "error": "Invalid email format in authentication header"
            }), 401

        return fn(*args, **kwargs)
    return wrapper


def no_store(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        response = make_response(fn(*args, **kwargs))
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
        response.headers["Pragma"] = "no-cache"
        return response
    return wrapper
