"""Task, milestone and cost estimate ledger for in-progress projects."""

from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.exceptions import InvalidStateError, NotFoundError
from src.marketplace.core.logging import get_logger
from src.marketplace.models import (
    ActivityAction,
    CostCategory,
    CostEstimate,
    Milestone,
    MilestoneStatus,
    PaymentStatus,
    ProjectRole,
    ProjectStatus,
    Task,
    TaskStatus,
)
from src.marketplace.models.base import utc_now
from src.marketplace.repositories import (
    CostEstimateRepository,
    MilestoneRepository,
    TaskRepository,
)
from src.marketplace.schemas.ledger import (
    CategoryTotals,
    CostEstimateCreate,
    CostEstimateUpdate,
    CostSummary,
    MilestoneCreate,
    MilestoneUpdate,
    TaskCreate,
    TaskUpdate,
)
from src.marketplace.services.access_service import AccessResolver, ProjectAccess
from src.marketplace.services.activity_service import ActivityLogWriter
from src.marketplace.services.base import BaseService

logger = get_logger(__name__)

MEMBER_ROLES = (ProjectRole.OWNER, ProjectRole.ASSIGNED_DESIGNER)


def summarize_costs(estimates: list[CostEstimate]) -> CostSummary:
    """Totals overall and per category; every category is always present."""
    by_category = {category: CategoryTotals() for category in CostCategory}
    total_estimated = Decimal("0")
    total_actual = Decimal("0")
    for estimate in estimates:
        totals = by_category[CostCategory(estimate.category)]
        totals.estimated += estimate.estimated_amount
        total_estimated += estimate.estimated_amount
        if estimate.actual_amount is not None:
            totals.actual += estimate.actual_amount
            total_actual += estimate.actual_amount
    return CostSummary(
        total_estimated=total_estimated,
        total_actual=total_actual,
        by_category=by_category,
    )


def _apply_changes(entity: Any, changes: dict[str, Any]) -> None:
    for field, value in changes.items():
        setattr(entity, field, value)
    entity.updated_at = utc_now()


class LedgerService(BaseService):
    """Execution-phase records shared by the owner and the assigned designer.

    Reads are open to both roles in any project status. Mutations
    additionally require the project to be in progress.
    """

    def __init__(
        self,
        session: AsyncSession,
        access: AccessResolver | None = None,
        activity: ActivityLogWriter | None = None,
    ):
        super().__init__(session)
        self.task_repo = TaskRepository(session)
        self.milestone_repo = MilestoneRepository(session)
        self.cost_repo = CostEstimateRepository(session)
        self.access = access or AccessResolver(session)
        self.activity = activity or ActivityLogWriter(session)

    async def _require_writable(
        self,
        project_id: UUID,
        user_id: UUID,
        roles: tuple[ProjectRole, ...] = MEMBER_ROLES,
    ) -> ProjectAccess:
        access = await self.access.require(project_id, user_id, *roles)
        if access.project.status_enum is not ProjectStatus.IN_PROGRESS:
            raise InvalidStateError("Project must be in progress to change its ledger")
        return access

    # Tasks

    async def create_task(self, project_id: UUID, user_id: UUID, data: TaskCreate) -> Task:
        async with self.transaction("create_task"):
            await self._require_writable(project_id, user_id)
            task = Task(
                project_id=project_id,
                created_by=user_id,
                assigned_to=data.assigned_to,
                title=data.title,
                description=data.description,
                due_date=data.due_date,
                status=TaskStatus.TODO.value,
            )
            self.task_repo.add(task)
            self.activity.record(
                project_id,
                user_id,
                ActivityAction.TASK_CREATED,
                {"task_id": task.id, "title": task.title},
            )
        return task

    async def list_tasks(
        self,
        project_id: UUID,
        user_id: UUID,
        status: TaskStatus | None = None,
    ) -> list[Task]:
        await self.access.require(project_id, user_id, *MEMBER_ROLES)
        return await self.task_repo.list_by_project(project_id, status.value if status else None)

    async def update_task_status(self, task_id: UUID, user_id: UUID, status: TaskStatus) -> Task:
        """Change a task's status; completed_at tracks the completed state."""
        async with self.transaction("update_task_status"):
            task = await self._get_task(task_id)
            await self._require_writable(task.project_id, user_id)
            previous = task.status
            task.status = status.value
            task.completed_at = utc_now() if status is TaskStatus.COMPLETED else None
            task.updated_at = utc_now()
            self.activity.record(
                task.project_id,
                user_id,
                ActivityAction.TASK_STATUS_CHANGED,
                {"task_id": task.id, "from": previous, "to": status},
            )
        return task

    async def update_task(self, task_id: UUID, user_id: UUID, patch: TaskUpdate) -> Task:
        async with self.transaction("update_task"):
            task = await self._get_task(task_id)
            await self._require_writable(task.project_id, user_id)
            changes = patch.model_dump(exclude_unset=True, exclude_none=True)
            _apply_changes(task, changes)
            self.activity.record(
                task.project_id,
                user_id,
                ActivityAction.TASK_UPDATED,
                {"task_id": task.id, "fields": sorted(changes)},
            )
        return task

    async def delete_task(self, task_id: UUID, user_id: UUID) -> None:
        async with self.transaction("delete_task"):
            task = await self._get_task(task_id)
            await self._require_writable(task.project_id, user_id)
            await self.task_repo.delete(task)
            self.activity.record(
                task.project_id,
                user_id,
                ActivityAction.TASK_DELETED,
                {"task_id": task.id, "title": task.title},
            )

    # Milestones

    async def create_milestone(
        self, project_id: UUID, user_id: UUID, data: MilestoneCreate
    ) -> Milestone:
        """Append a milestone at the end of the project's milestone order."""
        async with self.transaction("create_milestone"):
            await self._require_writable(project_id, user_id)
            milestone = Milestone(
                project_id=project_id,
                title=data.title,
                description=data.description,
                target_date=data.target_date,
                payment_amount=data.payment_amount,
                order_index=await self.milestone_repo.count_by_project(project_id),
            )
            self.milestone_repo.add(milestone)
            self.activity.record(
                project_id,
                user_id,
                ActivityAction.MILESTONE_CREATED,
                {"milestone_id": milestone.id, "title": milestone.title},
            )
        return milestone

    async def list_milestones(self, project_id: UUID, user_id: UUID) -> list[Milestone]:
        await self.access.require(project_id, user_id, *MEMBER_ROLES)
        return await self.milestone_repo.list_by_project(project_id)

    async def update_milestone_status(
        self, milestone_id: UUID, user_id: UUID, status: MilestoneStatus
    ) -> Milestone:
        async with self.transaction("update_milestone_status"):
            milestone = await self._get_milestone(milestone_id)
            await self._require_writable(milestone.project_id, user_id)
            previous = milestone.status
            milestone.status = status.value
            milestone.completed_at = utc_now() if status is MilestoneStatus.COMPLETED else None
            milestone.updated_at = utc_now()
            self.activity.record(
                milestone.project_id,
                user_id,
                ActivityAction.MILESTONE_STATUS_CHANGED,
                {"milestone_id": milestone.id, "from": previous, "to": status},
            )
        return milestone

    async def update_milestone_payment(
        self, milestone_id: UUID, user_id: UUID, payment_status: PaymentStatus
    ) -> Milestone:
        """Record payment for a milestone. Only the project owner may do this."""
        async with self.transaction("update_milestone_payment"):
            milestone = await self._get_milestone(milestone_id)
            await self._require_writable(milestone.project_id, user_id, (ProjectRole.OWNER,))
            previous = milestone.payment_status
            milestone.payment_status = payment_status.value
            milestone.paid_at = utc_now() if payment_status is PaymentStatus.PAID else None
            milestone.updated_at = utc_now()
            self.activity.record(
                milestone.project_id,
                user_id,
                ActivityAction.PAYMENT_STATUS_CHANGED,
                {"milestone_id": milestone.id, "from": previous, "to": payment_status},
            )
        logger.info(
            "Milestone payment status changed",
            milestone_id=str(milestone.id),
            payment_status=payment_status.value,
        )
        return milestone

    async def update_milestone(
        self, milestone_id: UUID, user_id: UUID, patch: MilestoneUpdate
    ) -> Milestone:
        async with self.transaction("update_milestone"):
            milestone = await self._get_milestone(milestone_id)
            await self._require_writable(milestone.project_id, user_id)
            changes = patch.model_dump(exclude_unset=True, exclude_none=True)
            _apply_changes(milestone, changes)
            self.activity.record(
                milestone.project_id,
                user_id,
                ActivityAction.MILESTONE_UPDATED,
                {"milestone_id": milestone.id, "fields": sorted(changes)},
            )
        return milestone

    async def delete_milestone(self, milestone_id: UUID, user_id: UUID) -> None:
        async with self.transaction("delete_milestone"):
            milestone = await self._get_milestone(milestone_id)
            await self._require_writable(milestone.project_id, user_id)
            await self.milestone_repo.delete(milestone)
            self.activity.record(
                milestone.project_id,
                user_id,
                ActivityAction.MILESTONE_DELETED,
                {"milestone_id": milestone.id, "title": milestone.title},
            )

    # Cost estimates

    async def create_cost_estimate(
        self, project_id: UUID, user_id: UUID, data: CostEstimateCreate
    ) -> CostEstimate:
        async with self.transaction("create_cost_estimate"):
            await self._require_writable(project_id, user_id)
            estimate = CostEstimate(
                project_id=project_id,
                category=data.category.value,
                description=data.description,
                estimated_amount=data.estimated_amount,
                actual_amount=data.actual_amount,
            )
            self.cost_repo.add(estimate)
            self.activity.record(
                project_id,
                user_id,
                ActivityAction.COST_ESTIMATE_ADDED,
                {
                    "cost_estimate_id": estimate.id,
                    "category": data.category,
                    "estimated_amount": data.estimated_amount,
                },
            )
        return estimate

    async def list_cost_estimates(
        self, project_id: UUID, user_id: UUID
    ) -> tuple[list[CostEstimate], CostSummary]:
        await self.access.require(project_id, user_id, *MEMBER_ROLES)
        estimates = await self.cost_repo.list_by_project(project_id)
        return estimates, summarize_costs(estimates)

    async def update_cost_estimate(
        self, estimate_id: UUID, user_id: UUID, patch: CostEstimateUpdate
    ) -> CostEstimate:
        async with self.transaction("update_cost_estimate"):
            estimate = await self._get_cost_estimate(estimate_id)
            await self._require_writable(estimate.project_id, user_id)
            changes = patch.model_dump(exclude_unset=True, exclude_none=True)
            if changes.get("category") is not None:
                changes["category"] = changes["category"].value
            _apply_changes(estimate, changes)
            self.activity.record(
                estimate.project_id,
                user_id,
                ActivityAction.COST_ESTIMATE_UPDATED,
                {"cost_estimate_id": estimate.id, "fields": sorted(changes)},
            )
        return estimate

    async def delete_cost_estimate(self, estimate_id: UUID, user_id: UUID) -> None:
        async with self.transaction("delete_cost_estimate"):
            estimate = await self._get_cost_estimate(estimate_id)
            await self._require_writable(estimate.project_id, user_id)
            await self.cost_repo.delete(estimate)
            self.activity.record(
                estimate.project_id,
                user_id,
                ActivityAction.COST_ESTIMATE_DELETED,
                {"cost_estimate_id": estimate.id, "description": estimate.description},
            )

    # Lookups

    async def _get_task(self, task_id: UUID) -> Task:
        task = await self.task_repo.get_by_id(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    async def _get_milestone(self, milestone_id: UUID) -> Milestone:
        milestone = await self.milestone_repo.get_by_id(milestone_id)
        if milestone is None:
            raise NotFoundError("Milestone not found")
        return milestone

    async def _get_cost_estimate(self, estimate_id: UUID) -> CostEstimate:
        estimate = await self.cost_repo.get_by_id(estimate_id)
        if estimate is None:
            raise NotFoundError("Cost estimate not found")
        return estimate
