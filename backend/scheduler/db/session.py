import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from scheduler.core.db import register_query_timing

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./scheduler.db"

# Create Base class for models
Base = declarative_base()

# Internal lazy globals
_engine = None
_SessionLocal = None
_database_url = None


def _build_engine(database_url: str):
    url = make_url(database_url)

    if url.drivername.startswith("postgres"):
        return create_engine(
            database_url,
            pool_size=20,
            max_overflow=40,
            pool_pre_ping=True,
            pool_recycle=3600,
            connect_args={
                "application_name": "scheduler",  # Visible in pg_stat_activity
                "connect_timeout": 10,
            },
            echo=False,
        )

    if url.drivername.startswith("sqlite") and url.database in (None, "", ":memory:"):
        # Single shared in-memory database so DDL persists across sessions
        return create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    if url.drivername.startswith("sqlite"):
        return create_engine(
            database_url, echo=False, connect_args={"check_same_thread": False}
        )

    return create_engine(database_url, echo=False)


def get_engine():
    """Return a cached SQLAlchemy engine, creating it from DATABASE_URL on
    first call. This allows tests to set DATABASE_URL before the engine is
    constructed."""
    global _engine
    global _SessionLocal
    global _database_url
    database_url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

    if _engine is None or _database_url != database_url:
        if _engine is not None:
            _engine.dispose()
        _engine = _build_engine(database_url)
        _SessionLocal = None
        _database_url = database_url
        register_query_timing(_engine)
        logger.debug(
            "SQLAlchemy engine created",
            extra={
                "context": {
                    "url": _engine.url.render_as_string(hide_password=True),
                    "dialect": _engine.dialect.name,
                }
            },
        )
    return _engine


def get_sessionmaker():
    """Return a cached sessionmaker bound to the lazy engine."""
    global _SessionLocal
    engine = get_engine()
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return _SessionLocal


def SessionLocal():
    """Return a new Session bound to the current engine.

    Usable as a context manager: ``with SessionLocal() as db: ...``.
    """
    return get_sessionmaker()()


def get_db():
    """Dependency to get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Create all tables in database using the lazy engine."""
    # Models must be imported so Base.metadata is populated
    from scheduler.db import base  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def drop_tables():
    """Drop all tables (used by tests and ``manage.py init_db --reset``)."""
    from scheduler.db import base  # noqa: F401

    Base.metadata.drop_all(bind=get_engine())
