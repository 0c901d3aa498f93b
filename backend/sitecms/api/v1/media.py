# sitecms/api/v1/media.py
from flask import jsonify, request
from sitecms.application.media.delete_image import delete_image
from sitecms.application.media.list_images import list_image_folders, list_images
from sitecms.application.media.upload_image import upload_image
from sitecms.errors import error_response
from sitecms.normalizers.image import normalize_image
from sitecms.utils.decorators import admin_required, no_store
from . import v1_bp


@v1_bp.route("/admin/images", methods=["GET"])
@admin_required
@no_store
def list_media():
    images = list_images(folder=request.args.get("folder") or None)

    return jsonify({
        "success": True,
        "data": {
            "images": [normalize_image(img) for img in images],
            "total": len(images),
            "folders": list_image_folders(),
        }
    })


@v1_bp.route("/admin/upload", methods=["POST"])
@admin_required
def upload_media():
    file = request.files.get("file")
    if file is None or not file.filename:
        return error_response("No file provided", 400)

    folder = request.form.get("folder")
    if not folder:
        return error_response("folder is required", 400)

    result = upload_image(
        folder=folder,
        filename=file.filename,
        content_type=file.mimetype,
        data=file.read(),
    )

    return jsonify({"success": True, "data": result}), 200


@v1_bp.route("/admin/upload/<path:key>", methods=["DELETE"])
@admin_required
def delete_media(key):
    delete_image(key=key)

    return jsonify({
        "success": True,
        "data": {
            "deleted": True,
            "key": key,
            "moved_to_trash": True,
        }
    }), 200
