"""Database engine management."""

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.marketplace.core.config import get_settings

_engine: AsyncEngine | None = None


def is_sqlite_url(url: str) -> bool:
    return url.startswith("sqlite")


def _engine_kwargs(url: str) -> dict[str, Any]:
    """Pool sizing only applies to server databases."""
    settings = get_settings()
    if is_sqlite_url(url):
        return {}
    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_pre_ping": True,
    }


def configure_sqlite(engine: AsyncEngine) -> None:
    """Configure SQLite connections for concurrent writers.

    Every transaction takes the write lock at BEGIN, so competing commands
    queue on busy_timeout and the later one reads the earlier one's
    committed state.
    """
    if not is_sqlite_url(str(engine.url)):
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, connection_record: Any) -> None:
        # SQLAlchemy emits BEGIN itself (see _begin_immediate)
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def get_engine() -> AsyncEngine:
    """Get or create the database engine singleton."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.database_url,
            echo=settings.database_echo,
            **_engine_kwargs(settings.database_url),
        )
        configure_sqlite(_engine)
    return _engine


async def dispose_engine() -> None:
    """Dispose the database engine. Call during shutdown."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None


def get_sync_url(url: str) -> str:
    """Convert an async driver URL to its sync counterpart (for Alembic)."""
    return url.replace("+asyncpg", "+psycopg").replace("+aiosqlite", "")
