"""Shared transaction handling for workflow services."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.exceptions import MarketplaceError
from src.marketplace.core.logging import get_logger

logger = get_logger(__name__)


class BaseService:
    """Base for services that own a unit of work on one session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def transaction(self, operation: str) -> AsyncIterator[None]:
        """Run a command as a single transaction.

        Commits when the block exits cleanly. Any exception rolls back every
        write made in the block and is re-raised unchanged.
        """
        try:
            yield
            await self.session.commit()
        except MarketplaceError as e:
            await self.session.rollback()
            logger.info("Command rolled back", operation=operation, error=e.error, detail=e.message)
            raise
        except Exception:
            await self.session.rollback()
            logger.exception("Command failed", operation=operation)
            raise
