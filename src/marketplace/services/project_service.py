"""Project lifecycle service - owns project status transitions."""

from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.background import fire_and_forget
from src.marketplace.core.config import get_settings
from src.marketplace.core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from src.marketplace.core.logging import get_logger
from src.marketplace.core.notifications import (
    LoggingNotifier,
    Notification,
    NotificationType,
    Notifier,
    dispatch,
)
from src.marketplace.models import (
    ActivityAction,
    ActivityLog,
    Project,
    ProjectRole,
    ProjectStatus,
)
from src.marketplace.models.transitions import ensure_transition
from src.marketplace.repositories import (
    DesignerProfileRepository,
    HomeownerProfileRepository,
    ProjectRepository,
    PropertyRepository,
)
from src.marketplace.schemas.project import ProjectCreate, ProjectUpdate
from src.marketplace.services.access_service import AccessResolver
from src.marketplace.services.activity_service import ActivityLogWriter
from src.marketplace.services.base import BaseService

logger = get_logger(__name__)

MEMBER_ROLES = (ProjectRole.OWNER, ProjectRole.ASSIGNED_DESIGNER)


def _check_budget(budget_min: Decimal | None, budget_max: Decimal | None) -> None:
    if budget_min is not None and budget_max is not None and budget_min > budget_max:
        raise ValidationError("budget_min cannot be greater than budget_max")


class ProjectService(BaseService):
    """Project lifecycle: draft -> seeking_designer -> in_progress -> completed.

    Public commands each run in their own transaction. The `apply_*` methods
    perform a transition inside the caller's transaction without committing,
    so the negotiation service can compose them into larger units.
    """

    def __init__(
        self,
        session: AsyncSession,
        access: AccessResolver | None = None,
        activity: ActivityLogWriter | None = None,
        notifier: Notifier | None = None,
    ):
        super().__init__(session)
        self.project_repo = ProjectRepository(session)
        self.property_repo = PropertyRepository(session)
        self.homeowner_repo = HomeownerProfileRepository(session)
        self.designer_repo = DesignerProfileRepository(session)
        self.access = access or AccessResolver(session)
        self.activity = activity or ActivityLogWriter(session)
        self.notifier = notifier or LoggingNotifier()

    # Commands

    async def create_project(self, user_id: UUID, data: ProjectCreate) -> Project:
        """Create a project in draft for the calling homeowner.

        Raises:
            NotFoundError: If the caller has no homeowner profile, or the
                property does not exist or belongs to someone else
            ValidationError: If the budget range is inverted
        """
        async with self.transaction("create_project"):
            homeowner = await self.homeowner_repo.get_by_user_id(user_id)
            if homeowner is None:
                raise NotFoundError("Homeowner profile not found")

            _check_budget(data.budget_min, data.budget_max)
            if data.property_id is not None:
                await self._require_property(data.property_id, homeowner.id)

            project = Project(
                homeowner_id=homeowner.id,
                property_id=data.property_id,
                title=data.title,
                scope=data.scope.value,
                scope_details=data.scope_details.model_dump(),
                budget_min=data.budget_min,
                budget_max=data.budget_max,
                timeline_weeks=data.timeline_weeks,
                start_timeline=data.start_timeline,
                status=ProjectStatus.DRAFT.value,
            )
            self.project_repo.add(project)
            await self.session.flush()

            self.activity.record(
                project.id,
                user_id,
                ActivityAction.PROJECT_CREATED,
                {"title": project.title, "status": project.status},
            )

        logger.info("Project created", project_id=str(project.id))
        return project

    async def update_project(
        self,
        project_id: UUID,
        user_id: UUID,
        patch: ProjectUpdate,
    ) -> Project:
        """Apply a partial update to a draft project.

        Raises:
            InvalidStateError: If the project has left draft
        """
        async with self.transaction("update_project"):
            access = await self.access.require(project_id, user_id, ProjectRole.OWNER)
            project = access.project
            if project.status_enum is not ProjectStatus.DRAFT:
                raise InvalidStateError("Can only update projects in draft status")

            changes: dict[str, Any] = patch.model_dump(exclude_unset=True, mode="python")
            if "title" in changes and changes["title"] is None:
                raise ValidationError("Project title cannot be empty")
            if "scope" in changes and changes["scope"] is not None:
                changes["scope"] = patch.scope.value  # type: ignore[union-attr]
            if changes.get("scope_details") is None:
                changes.pop("scope_details", None)
            if changes.get("property_id") is not None and access.homeowner is not None:
                await self._require_property(changes["property_id"], access.homeowner.id)

            _check_budget(
                changes.get("budget_min", project.budget_min),
                changes.get("budget_max", project.budget_max),
            )

            if changes:
                # Conditional on draft: send_request may have moved it on meanwhile
                updated = await self.project_repo.update_if_status(
                    project, ProjectStatus.DRAFT.value, **changes
                )
                if not updated:
                    raise ConflictError("Project was modified concurrently")

                self.activity.record(
                    project.id,
                    user_id,
                    ActivityAction.PROJECT_UPDATED,
                    {"fields": sorted(changes)},
                )

        return project

    async def start_seeking_designer(self, project_id: UUID, user_id: UUID) -> Project:
        """Open a draft project to designers."""
        async with self.transaction("start_seeking_designer"):
            access = await self.access.require(project_id, user_id, ProjectRole.OWNER)
            await self.apply_start_seeking_designer(access.project, user_id)
        return access.project

    async def assign_designer(
        self,
        project_id: UUID,
        designer_id: UUID,
        user_id: UUID,
    ) -> Project:
        """Move a project to in_progress with the given designer.

        Raises:
            NotFoundError: If the designer does not exist
            InvalidStateError: If the project cannot move to in_progress
        """
        async with self.transaction("assign_designer"):
            access = await self.access.require(project_id, user_id, ProjectRole.OWNER)
            designer = await self.designer_repo.get_by_id(designer_id)
            if designer is None:
                raise NotFoundError("Designer not found")
            await self.apply_assign_designer(access.project, designer_id, user_id)

        self.notify(
            [
                Notification(
                    user_id=designer.user_id,
                    type=NotificationType.DESIGNER_ASSIGNED,
                    title="You have been assigned to a project",
                    message=access.project.title,
                    data={"project_id": str(project_id)},
                )
            ]
        )
        return access.project

    async def complete_project(self, project_id: UUID, user_id: UUID) -> Project:
        """Mark an in-progress project completed."""
        async with self.transaction("complete_project"):
            access = await self.access.require(project_id, user_id, ProjectRole.OWNER)
            await self.apply_transition(access.project, ProjectStatus.COMPLETED, user_id)
        return access.project

    async def cancel_project(
        self,
        project_id: UUID,
        user_id: UUID,
        reason: str | None = None,
    ) -> Project:
        """Cancel a project from any non-terminal status.

        The reason is kept in the activity log only.
        """
        async with self.transaction("cancel_project"):
            access = await self.access.require(project_id, user_id, ProjectRole.OWNER)
            await self.apply_cancel(access.project, user_id, reason)
        return access.project

    # Transitions composed by other services (no commit)

    async def apply_transition(
        self,
        project: Project,
        target: ProjectStatus,
        user_id: UUID | None,
        **values: Any,
    ) -> ProjectStatus:
        """Validate and apply one transition, logging `status_changed`.

        Returns:
            The status the project was in before the transition

        Raises:
            InvalidStateError: If the edge is not in the project table
            ConflictError: If the status changed since it was read
        """
        current = project.status_enum
        ensure_transition(current, target)

        moved = await self.project_repo.transition_status(
            project, current.value, target.value, **values
        )
        if not moved:
            raise ConflictError("Project status changed concurrently")

        self.activity.record(
            project.id,
            user_id,
            ActivityAction.STATUS_CHANGED,
            {"from": current, "to": target},
        )
        logger.info(
            "Project status changed",
            project_id=str(project.id),
            from_status=current.value,
            to_status=target.value,
        )
        return current

    async def apply_start_seeking_designer(self, project: Project, user_id: UUID | None) -> None:
        await self.apply_transition(project, ProjectStatus.SEEKING_DESIGNER, user_id)

    async def apply_assign_designer(
        self,
        project: Project,
        designer_id: UUID,
        user_id: UUID | None,
    ) -> None:
        """Move to in_progress and set the designer in the same UPDATE."""
        await self.apply_transition(
            project, ProjectStatus.IN_PROGRESS, user_id, designer_id=designer_id
        )
        self.activity.record(
            project.id,
            user_id,
            ActivityAction.DESIGNER_ASSIGNED,
            {"designer_id": designer_id},
        )

    async def apply_cancel(
        self,
        project: Project,
        user_id: UUID | None,
        reason: str | None = None,
    ) -> None:
        previous = await self.apply_transition(project, ProjectStatus.CANCELLED, user_id)
        self.activity.record(
            project.id,
            user_id,
            ActivityAction.PROJECT_CANCELLED,
            {"reason": reason, "previous_status": previous},
        )

    # Reads

    async def get_project(self, project_id: UUID, user_id: UUID) -> Project:
        """Get a project visible to its owner or assigned designer."""
        access = await self.access.require(project_id, user_id, *MEMBER_ROLES)
        return access.project

    async def list_homeowner_projects(
        self,
        user_id: UUID,
        status: ProjectStatus | None = None,
    ) -> list[Project]:
        homeowner = await self.homeowner_repo.get_by_user_id(user_id)
        if homeowner is None:
            raise NotFoundError("Homeowner profile not found")
        return await self.project_repo.list_by_homeowner(
            homeowner.id, status.value if status else None
        )

    async def list_designer_projects(
        self,
        user_id: UUID,
        status: ProjectStatus | None = None,
    ) -> list[Project]:
        designer = await self.designer_repo.get_by_user_id(user_id)
        if designer is None:
            raise NotFoundError("Designer profile not found")
        return await self.project_repo.list_by_designer(
            designer.id, status.value if status else None
        )

    async def get_project_activity(
        self,
        project_id: UUID,
        user_id: UUID,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[ActivityLog], str | None, bool]:
        """Project timeline, newest first, with cursor pagination."""
        await self.access.require(project_id, user_id, *MEMBER_ROLES)
        return await self.activity.list_for_project(
            project_id,
            cursor=cursor,
            limit=limit or get_settings().activity_page_size,
        )

    # Helpers

    async def _require_property(self, property_id: UUID, homeowner_id: UUID) -> None:
        if await self.property_repo.get_owned(property_id, homeowner_id) is None:
            raise NotFoundError("Property not found")

    def notify(self, notifications: list[Notification]) -> None:
        """Hand notifications to the notifier after commit, without waiting."""
        if notifications:
            fire_and_forget(dispatch(self.notifier, notifications), name="notify")
