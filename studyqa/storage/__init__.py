"""Storage backends and the startup-time factory that picks one."""
import logging

from studyqa.core.config import Settings
from studyqa.storage.base import Storage
from studyqa.storage.memory import MemoryStorage

logger = logging.getLogger(__name__)

BACKENDS = ("memory", "sql", "mongo")


def create_storage(settings: Settings) -> Storage:
    """Build the storage backend named by STORAGE_BACKEND."""
    backend = settings.STORAGE_BACKEND.lower()

    if backend == "memory":
        logger.info("Using in-memory storage")
        return MemoryStorage()

    if backend == "sql":
        from studyqa.db.sessions import create_db_engine, create_session_factory
        from studyqa.storage.sql import SQLStorage

        logger.info("Using relational storage")
        engine = create_db_engine(settings.DATABASE_URL)
        return SQLStorage(create_session_factory(engine))

    if backend == "mongo":
        from studyqa.storage.mongo import MongoStorage

        logger.info("Using MongoDB storage")
        return MongoStorage.from_uri(
            settings.MONGODB_URI,
            settings.MONGODB_DB,
            timeout_ms=settings.MONGODB_TIMEOUT_MS,
        )

    raise ValueError(
        f"Unknown STORAGE_BACKEND '{settings.STORAGE_BACKEND}'. Expected one of: {', '.join(BACKENDS)}"
    )


__all__ = ["Storage", "MemoryStorage", "create_storage", "BACKENDS"]
