import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default="true"):
    return os.getenv(name, default).lower() == "true"


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Bucket (Cloudflare R2 / MinIO / S3)
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "minio")
    STORAGE_ENDPOINT = os.getenv("STORAGE_ENDPOINT")
    STORAGE_ACCESS_KEY = os.getenv("STORAGE_ACCESS_KEY")
    STORAGE_SECRET_KEY = os.getenv("STORAGE_SECRET_KEY")
    STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "site-assets")
    STORAGE_SECURE = _env_flag("STORAGE_SECURE")
    STORAGE_REGION = os.getenv("STORAGE_REGION", "auto")
    PUBLIC_ASSET_URL = os.getenv("PUBLIC_ASSET_URL", "")

    # Access gate
    ACCESS_EMAIL_HEADER = os.getenv(
        "ACCESS_EMAIL_HEADER", "cf-access-authenticated-user-email"
    )

    # Limits
    MAX_VERSIONS_PER_SECTION = 10
    MAX_JSON_SIZE_BYTES = 1 * 1024 * 1024
    MAX_IMAGE_SIZE_BYTES = 10 * 1024 * 1024
    MAX_CONTENT_LENGTH = 12 * 1024 * 1024

    # Caching
    CONTENT_CACHE_TTL_SECONDS = 60
    IMAGE_CACHE_TTL_SECONDS = 31536000


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    TESTING = True
    STORAGE_BACKEND = "memory"
    PUBLIC_ASSET_URL = "https://assets.example.test"


class ProductionConfig(BaseConfig):
    DEBUG = False


config_by_name = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig
}
