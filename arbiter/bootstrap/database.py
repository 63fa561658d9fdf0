"""Database session factory bootstrap (PostgreSQL via SQLAlchemy).

Usage:
    from arbiter.bootstrap.database import get_session_factory

    session_factory = get_session_factory(config.database_url)
    async with session_factory() as session:
        ...
"""

from __future__ import annotations

import os

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from structlog import get_logger

logger = get_logger()

_session_factory: async_sessionmaker[AsyncSession] | None = None
_engine: AsyncEngine | None = None


def to_async_url(url: str) -> str:
    """Convert a PostgreSQL URL to the asyncpg dialect.

    Example:
        >>> to_async_url("postgres://u:p@db:5432/arbiter")
        'postgresql+asyncpg://u:p@db:5432/arbiter'
    """
    if url.startswith("postgresql+asyncpg://"):
        return url
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    return f"postgresql+asyncpg://{url}"


def mask_url(url: str) -> str:
    """Hide the password of a connection URL for logging."""
    if "@" not in url:
        return url
    before_at, after_at = url.rsplit("@", 1)
    scheme, _, credentials = before_at.rpartition("//")
    if ":" not in credentials:
        return url
    user = credentials.split(":", 1)[0]
    return f"{scheme}//{user}:***@{after_at}"


def get_session_factory(database_url: str | None = None) -> async_sessionmaker[AsyncSession]:
    """Get the process-wide SQLAlchemy async session factory.

    Args:
        database_url: Connection URL; falls back to DATABASE_URL.

    Raises:
        ValueError: If no URL is configured.
    """
    global _session_factory, _engine

    if _session_factory is None:
        url = database_url or os.environ.get("DATABASE_URL")
        if not url:
            raise ValueError(
                "DATABASE_URL environment variable not set. "
                "Required for PostgreSQL repositories."
            )
        url = to_async_url(url)
        log = logger.bind(component="database_bootstrap")
        log.info("creating_database_engine", url=mask_url(url))

        _engine = create_async_engine(
            url,
            echo=os.environ.get("SQLALCHEMY_ECHO", "").lower() in ("1", "true", "yes"),
            pool_pre_ping=True,
        )
        _session_factory = async_sessionmaker(
            bind=_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        log.info("database_session_factory_created")

    return _session_factory


async def dispose_engine() -> None:
    """Close every pooled connection and forget the factory."""
    global _session_factory, _engine
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


def reset_database_bootstrap() -> None:
    """Forget the factory without disposing connections (for tests)."""
    global _session_factory, _engine
    _session_factory = None
    _engine = None
