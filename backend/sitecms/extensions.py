from flask import Flask, current_app

from .storage.base import ObjectStore, StorageError
from .storage.memory import MemoryObjectStore
from .storage.minio_store import MinioObjectStore


class Storage:
    """Flask extension owning the configured bucket."""

    def __init__(self, app: Flask | None = None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        app.extensions["storage"] = self._create_store(app.config)

    @staticmethod
    def _create_store(config) -> ObjectStore:
        backend = config.get("STORAGE_BACKEND", "minio")

        if backend == "memory":
            return MemoryObjectStore()

        if backend == "minio":
            return MinioObjectStore(
                config["STORAGE_BUCKET"],
                endpoint=config.get("STORAGE_ENDPOINT"),
                access_key=config.get("STORAGE_ACCESS_KEY"),
                secret_key=config.get("STORAGE_SECRET_KEY"),
                secure=config.get("STORAGE_SECURE", True),
                region=config.get("STORAGE_REGION"),
            )

        raise StorageError(f"Unknown storage backend: {backend}")

    @property
    def bucket(self) -> ObjectStore:
        return current_app.extensions["storage"]


storage = Storage()
