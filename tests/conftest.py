"""Root test fixtures shared across all test types.

Unit tests run without a database. Database fixtures live in
tests/integration/conftest.py.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test-marketplace.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-at-least-32-characters-long")

# ruff: noqa: E402 - Imports must be after env var setup
from src.marketplace.core.config import get_settings

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()
