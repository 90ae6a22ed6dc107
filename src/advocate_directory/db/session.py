"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from advocate_directory.core.settings import Settings, settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import advocate_directory.models  # noqa: E402,F401


def build_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine for ``url``; SQLite URLs get thread-sharing enabled."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, pool_pre_ping=True, echo=echo, connect_args=connect_args)


def _configured_engine(config: Settings) -> Engine | None:
    url = config.effective_database_url
    if not url:
        return None
    return build_engine(url, echo=config.sql_debug)


# Both stay None when no DATABASE_URL is configured; the in-memory dataset is used instead.
engine: Engine | None = _configured_engine(settings)

SessionLocal: sessionmaker[Session] | None = (
    sessionmaker(autocommit=False, autoflush=False, bind=engine) if engine is not None else None
)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    if SessionLocal is None:
        raise RuntimeError("DATABASE_URL is not configured")
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind: Engine | None = None) -> None:
    """Create all database tables."""
    target = bind or engine
    if target is None:
        raise RuntimeError("DATABASE_URL is not configured")
    Base.metadata.create_all(bind=target)


def drop_tables(bind: Engine | None = None) -> None:
    """Drop all database tables."""
    target = bind or engine
    if target is None:
        raise RuntimeError("DATABASE_URL is not configured")
    Base.metadata.drop_all(bind=target)
