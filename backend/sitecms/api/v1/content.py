# sitecms/api/v1/content.py
from flask import current_app, jsonify
from sitecms.application.cms.read_content import get_all_content, get_content
from sitecms.application.exceptions import InvalidSection
from sitecms.domain.sections import is_valid_section
from sitecms.errors import error_response
from . import v1_bp


def _cache_headers(response):
    ttl = current_app.config["CONTENT_CACHE_TTL_SECONDS"]
    response.headers["Cache-Control"] = (
        f"public, s-maxage={ttl}, stale-while-revalidate={ttl * 2}"
    )
    return response


@v1_bp.route("/content", methods=["GET"])
def all_content():
    return _cache_headers(jsonify({
        "success": True,
        "data": get_all_content()
    }))


@v1_bp.route("/content/<section>", methods=["GET"])
def section_content(section):
    if not is_valid_section(section):
        raise InvalidSection()

    document = get_content(section=section)
    if document is None:
        return error_response("Content not found", 404)

    return _cache_headers(jsonify({
        "success": True,
        "data": document
    }))
