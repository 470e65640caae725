"""Repositories for tasks, milestones and cost estimates."""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select

from src.marketplace.models import CostEstimate, Milestone, Task
from src.marketplace.repositories.base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    model = Task

    async def list_by_project(self, project_id: UUID, status: str | None = None) -> list[Task]:
        """List a project's tasks, newest first."""
        query = select(Task).where(Task.project_id == project_id)
        if status:
            query = query.where(Task.status == status)
        result = await self.session.execute(query.order_by(col(Task.created_at).desc()))
        return list(result.scalars().all())


class MilestoneRepository(BaseRepository[Milestone]):
    model = Milestone

    async def list_by_project(self, project_id: UUID) -> list[Milestone]:
        """List a project's milestones in display order."""
        result = await self.session.execute(
            select(Milestone)
            .where(Milestone.project_id == project_id)
            .order_by(col(Milestone.order_index).asc(), col(Milestone.created_at).asc())
        )
        return list(result.scalars().all())

    async def count_by_project(self, project_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Milestone).where(Milestone.project_id == project_id)
        )
        return result.scalar_one()


class CostEstimateRepository(BaseRepository[CostEstimate]):
    model = CostEstimate

    async def list_by_project(self, project_id: UUID) -> list[CostEstimate]:
        result = await self.session.execute(
            select(CostEstimate)
            .where(CostEstimate.project_id == project_id)
            .order_by(col(CostEstimate.created_at).desc())
        )
        return list(result.scalars().all())
