"""Project endpoints - lifecycle commands and the activity timeline."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.marketplace.api.dependencies import CurrentActor, ProjectServiceDep
from src.marketplace.models import ProjectStatus
from src.marketplace.schemas.activity import ActivityLogRead
from src.marketplace.schemas.pagination import PaginatedResponse
from src.marketplace.schemas.project import (
    ProjectCancel,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    description="Create a project in draft for the calling homeowner.",
    responses={
        201: {"description": "Project created"},
        404: {"description": "Homeowner profile or property not found"},
        422: {"description": "Invalid budget range"},
    },
)
async def create_project(
    body: ProjectCreate,
    actor: CurrentActor,
    service: ProjectServiceDep,
) -> ProjectRead:
    project = await service.create_project(actor.user_id, body)
    return ProjectRead.model_validate(project)


@router.get(
    "",
    response_model=list[ProjectRead],
    summary="List my projects",
    description="Projects owned by the calling homeowner, most recently updated first.",
)
async def list_projects(
    actor: CurrentActor,
    service: ProjectServiceDep,
    project_status: Annotated[ProjectStatus | None, Query(alias="status")] = None,
) -> list[ProjectRead]:
    projects = await service.list_homeowner_projects(actor.user_id, project_status)
    return [ProjectRead.model_validate(p) for p in projects]


@router.get(
    "/assigned",
    response_model=list[ProjectRead],
    summary="List assigned projects",
    description="Projects the calling designer is assigned to.",
)
async def list_assigned_projects(
    actor: CurrentActor,
    service: ProjectServiceDep,
    project_status: Annotated[ProjectStatus | None, Query(alias="status")] = None,
) -> list[ProjectRead]:
    projects = await service.list_designer_projects(actor.user_id, project_status)
    return [ProjectRead.model_validate(p) for p in projects]


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get project",
    responses={
        403: {"description": "Not the owner or assigned designer"},
        404: {"description": "Project not found"},
    },
)
async def get_project(
    project_id: UUID,
    actor: CurrentActor,
    service: ProjectServiceDep,
) -> ProjectRead:
    project = await service.get_project(project_id, actor.user_id)
    return ProjectRead.model_validate(project)


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update project",
    description="Update a project while it is still in draft.",
    responses={
        403: {"description": "Not the project owner"},
        409: {"description": "Project is no longer in draft"},
    },
)
async def update_project(
    project_id: UUID,
    body: ProjectUpdate,
    actor: CurrentActor,
    service: ProjectServiceDep,
) -> ProjectRead:
    project = await service.update_project(project_id, actor.user_id, body)
    return ProjectRead.model_validate(project)


@router.post(
    "/{project_id}/complete",
    response_model=ProjectRead,
    summary="Complete project",
    responses={409: {"description": "Project is not in progress"}},
)
async def complete_project(
    project_id: UUID,
    actor: CurrentActor,
    service: ProjectServiceDep,
) -> ProjectRead:
    project = await service.complete_project(project_id, actor.user_id)
    return ProjectRead.model_validate(project)


@router.post(
    "/{project_id}/cancel",
    response_model=ProjectRead,
    summary="Cancel project",
    responses={409: {"description": "Project already completed or cancelled"}},
)
async def cancel_project(
    project_id: UUID,
    actor: CurrentActor,
    service: ProjectServiceDep,
    body: ProjectCancel | None = None,
) -> ProjectRead:
    project = await service.cancel_project(
        project_id, actor.user_id, body.reason if body else None
    )
    return ProjectRead.model_validate(project)


@router.get(
    "/{project_id}/activity",
    response_model=PaginatedResponse[ActivityLogRead],
    summary="Project activity",
    description="Project timeline, newest first, with cursor-based pagination.",
)
async def get_project_activity(
    project_id: UUID,
    actor: CurrentActor,
    service: ProjectServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[ActivityLogRead]:
    entries, next_cursor, has_more = await service.get_project_activity(
        project_id, actor.user_id, cursor=cursor, limit=limit
    )
    return PaginatedResponse(
        items=[ActivityLogRead.model_validate(e) for e in entries],
        next_cursor=next_cursor,
        has_more=has_more,
    )
