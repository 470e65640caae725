"""Repository for Project entity."""

from uuid import UUID

from sqlmodel import col, select

from src.marketplace.models import Project
from src.marketplace.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    model = Project

    async def list_by_homeowner(
        self,
        homeowner_id: UUID,
        status: str | None = None,
    ) -> list[Project]:
        """List a homeowner's projects, most recently updated first."""
        query = select(Project).where(Project.homeowner_id == homeowner_id)
        if status:
            query = query.where(Project.status == status)
        result = await self.session.execute(query.order_by(col(Project.updated_at).desc()))
        return list(result.scalars().all())

    async def list_by_designer(
        self,
        designer_id: UUID,
        status: str | None = None,
    ) -> list[Project]:
        """List projects a designer is assigned to, most recently updated first."""
        query = select(Project).where(Project.designer_id == designer_id)
        if status:
            query = query.where(Project.status == status)
        result = await self.session.execute(query.order_by(col(Project.updated_at).desc()))
        return list(result.scalars().all())

    async def get_for_update(self, project_id: UUID) -> Project | None:
        """Load a project fresh from the database and lock its row.

        The lock is held until the transaction ends. Commands that change a
        project's requests or proposals take it before any other write.
        """
        result = await self.session.execute(
            select(Project)
            .where(Project.id == project_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
