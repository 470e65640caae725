"""Task, milestone and cost estimate endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.marketplace.api.dependencies import CurrentActor, LedgerServiceDep
from src.marketplace.models import TaskStatus
from src.marketplace.schemas.ledger import (
    CostEstimateCreate,
    CostEstimateList,
    CostEstimateRead,
    CostEstimateUpdate,
    MilestoneCreate,
    MilestonePaymentUpdate,
    MilestoneRead,
    MilestoneStatusUpdate,
    MilestoneUpdate,
    TaskCreate,
    TaskRead,
    TaskStatusUpdate,
    TaskUpdate,
)

router = APIRouter(tags=["ledger"])


# Tasks


@router.post(
    "/projects/{project_id}/tasks",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
    responses={409: {"description": "Project is not in progress"}},
)
async def create_task(
    project_id: UUID,
    body: TaskCreate,
    actor: CurrentActor,
    service: LedgerServiceDep,
) -> TaskRead:
    task = await service.create_task(project_id, actor.user_id, body)
    return TaskRead.model_validate(task)


@router.get("/projects/{project_id}/tasks", response_model=list[TaskRead], summary="List tasks")
async def list_tasks(
    project_id: UUID,
    actor: CurrentActor,
    service: LedgerServiceDep,
    task_status: Annotated[TaskStatus | None, Query(alias="status")] = None,
) -> list[TaskRead]:
    tasks = await service.list_tasks(project_id, actor.user_id, task_status)
    return [TaskRead.model_validate(t) for t in tasks]


@router.patch("/tasks/{task_id}", response_model=TaskRead, summary="Update task")
async def update_task(
    task_id: UUID,
    body: TaskUpdate,
    actor: CurrentActor,
    service: LedgerServiceDep,
) -> TaskRead:
    task = await service.update_task(task_id, actor.user_id, body)
    return TaskRead.model_validate(task)


@router.patch("/tasks/{task_id}/status", response_model=TaskRead, summary="Update task status")
async def update_task_status(
    task_id: UUID,
    body: TaskStatusUpdate,
    actor: CurrentActor,
    service: LedgerServiceDep,
) -> TaskRead:
    task = await service.update_task_status(task_id, actor.user_id, body.status)
    return TaskRead.model_validate(task)


@router.delete(
    "/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete task"
)
async def delete_task(
    task_id: UUID,
    actor: CurrentActor,
    service: LedgerServiceDep,
) -> None:
    await service.delete_task(task_id, actor.user_id)


# Milestones


@router.post(
    "/projects/{project_id}/milestones",
    response_model=MilestoneRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create milestone",
)
async def create_milestone(
    project_id: UUID,
    body: MilestoneCreate,
    actor: CurrentActor,
    service: LedgerServiceDep,
) -> MilestoneRead:
    milestone = await service.create_milestone(project_id, actor.user_id, body)
    return MilestoneRead.model_validate(milestone)


@router.get(
    "/projects/{project_id}/milestones",
    response_model=list[MilestoneRead],
    summary="List milestones",
)
async def list_milestones(
    project_id: UUID,
    actor: CurrentActor,
    service: LedgerServiceDep,
) -> list[MilestoneRead]:
    milestones = await service.list_milestones(project_id, actor.user_id)
    return [MilestoneRead.model_validate(m) for m in milestones]


@router.patch(
    "/milestones/{milestone_id}", response_model=MilestoneRead, summary="Update milestone"
)
async def update_milestone(
    milestone_id: UUID,
    body: MilestoneUpdate,
    actor: CurrentActor,
    service: LedgerServiceDep,
) -> MilestoneRead:
    milestone = await service.update_milestone(milestone_id, actor.user_id, body)
    return MilestoneRead.model_validate(milestone)


@router.patch(
    "/milestones/{milestone_id}/status",
    response_model=MilestoneRead,
    summary="Update milestone status",
)
async def update_milestone_status(
    milestone_id: UUID,
    body: MilestoneStatusUpdate,
    actor: CurrentActor,
    service: LedgerServiceDep,
) -> MilestoneRead:
    milestone = await service.update_milestone_status(milestone_id, actor.user_id, body.status)
    return MilestoneRead.model_validate(milestone)


@router.patch(
    "/milestones/{milestone_id}/payment",
    response_model=MilestoneRead,
    summary="Update milestone payment status",
    responses={403: {"description": "Only the project owner can record payments"}},
)
async def update_milestone_payment(
    milestone_id: UUID,
    body: MilestonePaymentUpdate,
    actor: CurrentActor,
    service: LedgerServiceDep,
) -> MilestoneRead:
    milestone = await service.update_milestone_payment(
        milestone_id, actor.user_id, body.payment_status
    )
    return MilestoneRead.model_validate(milestone)


@router.delete(
    "/milestones/{milestone_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete milestone",
)
async def delete_milestone(
    milestone_id: UUID,
    actor: CurrentActor,
    service: LedgerServiceDep,
) -> None:
    await service.delete_milestone(milestone_id, actor.user_id)


# Cost estimates


@router.post(
    "/projects/{project_id}/costs",
    response_model=CostEstimateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add cost estimate",
)
async def create_cost_estimate(
    project_id: UUID,
    body: CostEstimateCreate,
    actor: CurrentActor,
    service: LedgerServiceDep,
) -> CostEstimateRead:
    estimate = await service.create_cost_estimate(project_id, actor.user_id, body)
    return CostEstimateRead.model_validate(estimate)


@router.get(
    "/projects/{project_id}/costs",
    response_model=CostEstimateList,
    summary="List cost estimates",
    description="Cost estimates with totals overall and per category.",
)
async def list_cost_estimates(
    project_id: UUID,
    actor: CurrentActor,
    service: LedgerServiceDep,
) -> CostEstimateList:
    estimates, summary = await service.list_cost_estimates(project_id, actor.user_id)
    return CostEstimateList(
        items=[CostEstimateRead.model_validate(e) for e in estimates],
        summary=summary,
    )


@router.patch("/costs/{estimate_id}", response_model=CostEstimateRead, summary="Update cost")
async def update_cost_estimate(
    estimate_id: UUID,
    body: CostEstimateUpdate,
    actor: CurrentActor,
    service: LedgerServiceDep,
) -> CostEstimateRead:
    estimate = await service.update_cost_estimate(estimate_id, actor.user_id, body)
    return CostEstimateRead.model_validate(estimate)


@router.delete(
    "/costs/{estimate_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete cost"
)
async def delete_cost_estimate(
    estimate_id: UUID,
    actor: CurrentActor,
    service: LedgerServiceDep,
) -> None:
    await service.delete_cost_estimate(estimate_id, actor.user_id)
