from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from sitecms.application.exceptions import CMSError
from sitecms.domain.invariants.exceptions import ContentValidationError, InvariantViolation
from sitecms.storage.base import StorageError


def error_response(message, status_code, **extra):
    response = jsonify({"success": False, "error": message, **extra})
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(ContentValidationError)
    def handle_validation_error(error):
        return error_response(str(error), 400, details=error.errors)

    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        return error_response(str(error), 400)

    @app.errorhandler(CMSError)
    def handle_cms_error(error):
        if error.status_code >= 500:
            current_app.logger.error("%s: %s", type(error).__name__, error)
        return error_response(str(error), error.status_code)

    @app.errorhandler(StorageError)
    def handle_storage_error(error):
        current_app.logger.error("Storage failure: %s", error, exc_info=True)
        return error_response(str(error), 500)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return error_response(error.description, error.code)
