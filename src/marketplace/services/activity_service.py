"""Activity log writer - timeline entries for project history."""

from typing import Any
from uuid import UUID

from pydantic_core import to_jsonable_python
from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.logging import get_logger
from src.marketplace.models import ActivityAction, ActivityLog
from src.marketplace.repositories import ActivityLogRepository

logger = get_logger(__name__)


class ActivityLogWriter:
    """Appends activity entries to the caller's transaction.

    Entries are added to the same session as the mutation they describe, so
    they commit or roll back together with it. Building an entry is
    best-effort: a detail payload that cannot be serialized is logged and
    dropped rather than failing the business operation.
    """

    def __init__(self, session: AsyncSession, activity_repo: ActivityLogRepository | None = None):
        self.session = session
        self.activity_repo = activity_repo or ActivityLogRepository(session)

    def record(
        self,
        project_id: UUID,
        user_id: UUID | None,
        action: ActivityAction | str,
        detail: dict[str, Any] | None = None,
    ) -> ActivityLog | None:
        """Stage an activity entry (no flush/commit).

        Args:
            project_id: Project the entry belongs to
            user_id: Acting user, or None for system-generated entries
            action: Action tag
            detail: Structured payload; UUIDs, enums, decimals and datetimes
                are coerced to JSON-safe values

        Returns:
            The staged ActivityLog, or None if the entry could not be built
        """
        action_value = action.value if isinstance(action, ActivityAction) else action
        try:
            entry = ActivityLog(
                project_id=project_id,
                user_id=user_id,
                action=action_value,
                detail=to_jsonable_python(detail or {}),
            )
            self.activity_repo.add(entry)
        except Exception as e:
            logger.warning(
                "Failed to record activity",
                action=action_value,
                project_id=str(project_id),
                error=str(e),
            )
            return None
        return entry

    async def list_for_project(
        self,
        project_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[ActivityLog], str | None, bool]:
        """List a project's activity, newest first."""
        return await self.activity_repo.list_by_project(project_id, cursor=cursor, limit=limit)
