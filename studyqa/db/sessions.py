import logging
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studyqa.db.base import Base

# Import all models to ensure they're registered with Base
import studyqa.models  # noqa: F401

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str) -> Engine:
    logger.info("Initializing DB engine (checking configuration)")
    logger.info("DATABASE_URL configured: %s", bool(database_url))

    if not database_url:
        logger.error("DATABASE_URL is not configured. Set the DATABASE_URL env var.")
        raise RuntimeError("DATABASE_URL is not configured. Set the DATABASE_URL env var.")

    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite+pysqlite://"):
            # one shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    # enable pool_pre_ping to avoid stale/closed connections
    return create_engine(database_url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create tables if missing and return a session factory bound to the engine."""
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
