"""Database base configuration"""
import logging
import threading
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from asset_inventory.infrastructure.config.settings import settings

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()

# The engine is created on first use and shared by the whole process.
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None
_lock = threading.Lock()


def create_db_engine(database_url: Optional[str] = None) -> Engine:
    """Create an engine with connect args suited to the backend"""
    url = database_url or settings.get_database_url()
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        # SQLite needs check_same_thread=False, store calls run in worker threads.
        # timeout bounds how long a statement waits on a locked database.
        logger.info("Using SQLite database: %s", url)
        return create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": settings.STORE_TIMEOUT_SECONDS},
        )
    logger.info("Using %s database: %s@%s:%s", backend, settings.DB_NAME, settings.DB_HOST, settings.DB_PORT)
    return create_engine(
        url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=20,
        pool_timeout=settings.STORE_TIMEOUT_SECONDS,
        connect_args={
            "connect_timeout": max(1, int(settings.STORE_TIMEOUT_SECONDS)),
            "options": f"-c statement_timeout={int(settings.STORE_TIMEOUT_SECONDS * 1000)}",
        },
    )


def get_engine() -> Engine:
    """Return the process-wide engine, creating it on first call"""
    global _engine, _SessionLocal
    if _engine is None:
        with _lock:
            if _engine is None:
                _engine = create_db_engine()
                _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    return _engine


def get_session_factory() -> sessionmaker:
    get_engine()
    return _SessionLocal


def configure_engine(database_url: str) -> Engine:
    """Replace the shared engine, used by tests and scripts"""
    global _engine, _SessionLocal
    dispose_engine()
    with _lock:
        _engine = create_db_engine(database_url)
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    return _engine


def dispose_engine() -> None:
    global _engine, _SessionLocal
    with _lock:
        if _engine is not None:
            _engine.dispose()
        _engine = None
        _SessionLocal = None


def get_db():
    """Get database session

    FastAPI dependency that provides a session per request. Repositories
    commit their own transactions; this only guarantees the session is closed.
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables"""
    from asset_inventory.infrastructure.database import models  # noqa: F401  register models

    Base.metadata.create_all(bind=get_engine())
