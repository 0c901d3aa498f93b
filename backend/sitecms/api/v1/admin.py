# sitecms/api/v1/admin.py
from flask import current_app, g, jsonify, request
from sitecms.application.cms.list_versions import get_version_content, list_versions
from sitecms.application.cms.rollback_content import rollback_to_version
from sitecms.application.cms.update_content import update_content
from sitecms.application.exceptions import InvalidSection, VersionNotFound
from sitecms.domain.invariants.content import assert_content
from sitecms.domain.sections import is_valid_section
from sitecms.errors import error_response
from sitecms.normalizers.version import normalize_version
from sitecms.utils.decorators import admin_required, no_store
from sitecms.utils.versioning import iso_timestamp, utcnow
from . import v1_bp


def _require_section(section):
    if not is_valid_section(section):
        raise InvalidSection()


# ------------------------
# Content
# ------------------------
@v1_bp.route("/admin/content/<section>", methods=["PUT"])
@admin_required
def update_section_content(section):
    _require_section(section)

    data = request.get_json(silent=True)
    if data is None:
        return error_response("Invalid request body", 400)

    assert_content(
        section,
        data,
        max_json_size=current_app.config["MAX_JSON_SIZE_BYTES"],
    )

    result = update_content(
        section=section,
        document=data,
        editor=g.current_user,
        max_versions=current_app.config["MAX_VERSIONS_PER_SECTION"],
    )

    return jsonify({"success": True, "data": result}), 200


# ------------------------
# Versions
# ------------------------
@v1_bp.route("/admin/versions/<section>", methods=["GET"])
@admin_required
@no_store
def section_versions(section):
    _require_section(section)

    versions = list_versions(section=section)

    return jsonify({
        "success": True,
        "data": {
            "section": section,
            "versions": [normalize_version(v) for v in versions],
            "count": len(versions),
        }
    })


@v1_bp.route("/admin/versions/<section>/<version_id>", methods=["GET"])
@admin_required
@no_store
def version_detail(section, version_id):
    _require_section(section)

    document = get_version_content(section=section, version_id=version_id)
    if document is None:
        raise VersionNotFound()

    return jsonify({
        "success": True,
        "data": {
            "section": section,
            "version_id": version_id,
            "content": document,
        }
    })


@v1_bp.route("/admin/versions/<section>/rollback", methods=["POST"])
@admin_required
def rollback_section(section):
    _require_section(section)

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return error_response("Invalid request body", 400)

    version_id = data.get("versionId")
    if not version_id or not isinstance(version_id, str):
        return error_response("versionId is required", 400)

    note = data.get("note")
    if note is not None and not isinstance(note, str):
        return error_response("note must be a string", 400)

    result = rollback_to_version(
        section=section,
        version_id=version_id,
        editor=g.current_user,
        note=note,
        max_versions=current_app.config["MAX_VERSIONS_PER_SECTION"],
    )

    return jsonify({
        "success": True,
        "data": {
            "section": section,
            "restored_version_id": result["restored_version_id"],
            "backup_version_id": result["backup_version_id"],
            "rolled_back_at": iso_timestamp(utcnow()),
            "rolled_back_by": g.current_user,
        }
    }), 200
