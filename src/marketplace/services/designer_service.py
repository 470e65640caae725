"""Designer verification and search re-indexing."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.background import fire_and_forget
from src.marketplace.core.exceptions import NotFoundError
from src.marketplace.core.logging import get_logger
from src.marketplace.core.search import SearchIndexer
from src.marketplace.models import DesignerProfile
from src.marketplace.models.base import utc_now
from src.marketplace.repositories import DesignerProfileRepository
from src.marketplace.services.base import BaseService

logger = get_logger(__name__)


class DesignerService(BaseService):
    def __init__(self, session: AsyncSession, indexer: SearchIndexer | None = None):
        super().__init__(session)
        self.designer_repo = DesignerProfileRepository(session)
        self.indexer = indexer or SearchIndexer()

    async def verify_designer(self, designer_id: UUID) -> DesignerProfile:
        """Mark a designer verified, then re-index them in the background.

        Only verified designers can be sent requests. Indexing runs after
        commit; its failures are logged and never reach the caller.
        """
        async with self.transaction("verify_designer"):
            designer = await self.designer_repo.get_by_id(designer_id)
            if designer is None:
                raise NotFoundError("Designer not found")
            if not designer.is_verified:
                now = utc_now()
                designer.is_verified = True
                designer.verified_at = now
                designer.updated_at = now

        logger.info("Designer verified", designer_id=str(designer.id))
        fire_and_forget(
            self.indexer.index_designer(designer), name=f"index-designer-{designer.id}"
        )
        return designer
