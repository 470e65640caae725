from datetime import UTC, datetime

from sqlalchemy import DateTime

# Column type for every timestamp; values are timezone-aware UTC.
UtcDateTime = DateTime(timezone=True)


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)
