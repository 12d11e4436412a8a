"""
Database connection and session management
"""

import os
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import NullPool

from aeo_metrics.config import get_settings
from aeo_metrics.models import Base

# Lazy initialization so importing never opens a connection
_engine = None
_session_maker = None


def _get_database_url() -> str:
    """Get database URL with the psycopg driver selected for PostgreSQL"""
    settings = get_settings()
    database_url = settings.DATABASE_URL
    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+psycopg://", 1)
    return database_url


def _is_serverless() -> bool:
    """Check if running in serverless environment"""
    return bool(os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME"))


def _get_engine():
    """Lazy engine initialization"""
    global _engine
    if _engine is None:
        settings = get_settings()
        database_url = _get_database_url()

        engine_kwargs = {
            "echo": settings.DEBUG,
            "pool_pre_ping": True,
        }

        if _is_serverless():
            engine_kwargs["poolclass"] = NullPool
        elif not database_url.startswith("sqlite"):
            engine_kwargs["pool_size"] = settings.DATABASE_POOL_SIZE
            engine_kwargs["max_overflow"] = settings.DATABASE_MAX_OVERFLOW

        _engine = create_engine(database_url, **engine_kwargs)
    return _engine


def _get_session_maker():
    """Lazy session maker initialization"""
    global _session_maker
    if _session_maker is None:
        _session_maker = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=_get_engine(),
        )
    return _session_maker


def get_sync_db() -> Session:
    """Get a database session; the caller commits and closes it"""
    return _get_session_maker()()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """Session scope that commits on success and rolls back on error"""
    db = get_sync_db()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db():
    """Initialize database tables"""
    Base.metadata.create_all(bind=_get_engine())


def close_db():
    """Close database connections"""
    global _engine, _session_maker
    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_maker = None
