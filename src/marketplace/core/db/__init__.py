"""Database utilities - engine, session, migrations."""

from src.marketplace.core.db.engine import (
    configure_sqlite,
    dispose_engine,
    get_engine,
    get_sync_url,
    is_sqlite_url,
)
from src.marketplace.core.db.migrations import run_migrations_sync
from src.marketplace.core.db.session import get_session, get_session_factory

__all__ = [
    # Engine (async)
    "configure_sqlite",
    "dispose_engine",
    "get_engine",
    "is_sqlite_url",
    # URL conversion (for Alembic)
    "get_sync_url",
    # Session
    "get_session",
    "get_session_factory",
    # Migrations
    "run_migrations_sync",
]
