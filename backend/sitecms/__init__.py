import logging
import os

from flask import Flask, send_from_directory
from flask_swagger_ui import get_swaggerui_blueprint

from .api.v1 import v1_bp
from .commands import register_commands
from .config import config_by_name
from .errors import register_error_handlers
from .extensions import storage
from .middleware.access_middleware import access_middleware

OPENAPI_URL = "/openapi/cms.yaml"
SWAGGER_URL = "/swagger"


def create_app(config_name: str = "development") -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.logger.setLevel(app.config["LOG_LEVEL"])
    logging.getLogger("sitecms").setLevel(app.config["LOG_LEVEL"])

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    storage.init_app(app)

    # -------------------------------------------------
    # Middleware
    # -------------------------------------------------
    access_middleware(app)

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)
    register_commands(app)

    # -------------------------------------------------
    # API docs (public)
    # -------------------------------------------------
    _register_docs(app)

    return app


def _register_docs(app: Flask) -> None:
    docs_dir = os.path.join(app.root_path, "api", "v1")

    @app.route(OPENAPI_URL, methods=["GET"], endpoint="openapi_cms")
    def serve_openapi():
        return send_from_directory(docs_dir, "cms_openapi.yaml", mimetype="application/yaml")

    app.register_blueprint(
        get_swaggerui_blueprint(
            SWAGGER_URL,
            OPENAPI_URL,
            config={"app_name": "Site CMS API", "deepLinking": True},
        ),
        url_prefix=SWAGGER_URL,
    )
