"""Repository for ActivityLog entries."""

from uuid import UUID

from sqlmodel import col, select

from src.marketplace.models import ActivityLog
from src.marketplace.repositories.base import BaseRepository


class ActivityLogRepository(BaseRepository[ActivityLog]):
    """Append and read only; entries are never updated or deleted."""

    model = ActivityLog

    async def list_by_project(
        self,
        project_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        action: str | None = None,
    ) -> tuple[list[ActivityLog], str | None, bool]:
        """List a project's activity, newest first.

        Args:
            project_id: Project to filter by
            cursor: Pagination cursor
            limit: Maximum items to return
            action: Optional action tag filter

        Returns:
            Tuple of (entries, next_cursor, has_more)
        """
        query = select(ActivityLog).where(ActivityLog.project_id == project_id)
        if action:
            query = query.where(ActivityLog.action == action)
        return await self.paginate(query, cursor, limit, col(ActivityLog.id))
