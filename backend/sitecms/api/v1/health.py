from flask import current_app, jsonify
from . import v1_bp


@v1_bp.route("/health", methods=["GET"])
def health_check():
    return jsonify({
        "status": "ok",
        "service": "site-cms",
        "storage": current_app.config["STORAGE_BACKEND"],
    })
