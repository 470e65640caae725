"""Access control resolver - maps a user to their role on a project."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.exceptions import ForbiddenError, NotFoundError
from src.marketplace.models import (
    DesignerProfile,
    HomeownerProfile,
    Project,
    ProjectRequest,
    ProjectRole,
)
from src.marketplace.repositories import (
    DesignerProfileRepository,
    HomeownerProfileRepository,
    ProjectRepository,
)


@dataclass
class ProjectAccess:
    """Result of one access resolution, reused for the rest of a command."""

    project: Project
    role: ProjectRole
    homeowner: HomeownerProfile | None = None
    designer: DesignerProfile | None = None

    @property
    def is_owner(self) -> bool:
        return self.role is ProjectRole.OWNER

    @property
    def is_assigned_designer(self) -> bool:
        return self.role is ProjectRole.ASSIGNED_DESIGNER


class AccessResolver:
    """Resolves project roles from the caller's profiles.

    Nothing is cached between calls: designer assignment can change between
    two commands, so every command resolves again.
    """

    def __init__(self, session: AsyncSession):
        self.project_repo = ProjectRepository(session)
        self.homeowner_repo = HomeownerProfileRepository(session)
        self.designer_repo = DesignerProfileRepository(session)

    @staticmethod
    def role_for(
        project: Project,
        homeowner: HomeownerProfile | None,
        designer: DesignerProfile | None,
    ) -> ProjectRole:
        if homeowner is not None and project.homeowner_id == homeowner.id:
            return ProjectRole.OWNER
        if (
            designer is not None
            and project.designer_id is not None
            and project.designer_id == designer.id
        ):
            return ProjectRole.ASSIGNED_DESIGNER
        return ProjectRole.NONE

    async def resolve(self, project: Project, user_id: UUID) -> ProjectRole:
        """Return the caller's role on an already loaded project."""
        return (await self._access_for(project, user_id)).role

    async def load(
        self, project_id: UUID, user_id: UUID, *, for_update: bool = False
    ) -> ProjectAccess:
        """Load a project together with the caller's role on it.

        With `for_update` the project row stays locked until the transaction
        ends.

        Raises:
            NotFoundError: If the project does not exist
        """
        if for_update:
            project = await self.project_repo.get_for_update(project_id)
        else:
            project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        return await self._access_for(project, user_id)

    async def require(
        self,
        project_id: UUID,
        user_id: UUID,
        *roles: ProjectRole,
        for_update: bool = False,
    ) -> ProjectAccess:
        """Load a project and check the caller holds one of `roles`.

        Raises:
            NotFoundError: If the project does not exist
            ForbiddenError: If the caller's role is not in `roles`
        """
        access = await self.load(project_id, user_id, for_update=for_update)
        if access.role not in roles:
            raise ForbiddenError("You do not have access to this project")
        return access

    async def require_solicited_designer(
        self, request: ProjectRequest, user_id: UUID
    ) -> DesignerProfile:
        """Check the caller is the designer a request was sent to.

        Raises:
            ForbiddenError: If the caller has no designer profile or is not
                the request's designer
        """
        designer = await self.designer_repo.get_by_user_id(user_id)
        if designer is None or designer.id != request.designer_id:
            raise ForbiddenError("You can only respond to requests sent to you")
        return designer

    async def _access_for(self, project: Project, user_id: UUID) -> ProjectAccess:
        homeowner = await self.homeowner_repo.get_by_user_id(user_id)
        designer = await self.designer_repo.get_by_user_id(user_id)
        return ProjectAccess(
            project=project,
            role=self.role_for(project, homeowner, designer),
            homeowner=homeowner,
            designer=designer,
        )
