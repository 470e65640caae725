"""Designer administration endpoints."""

from uuid import UUID

from fastapi import APIRouter

from src.marketplace.api.dependencies import AdminActor, DesignerServiceDep
from src.marketplace.schemas.negotiation import DesignerSummary

router = APIRouter(prefix="/designers", tags=["designers"])


@router.post(
    "/{designer_id}/verify",
    response_model=DesignerSummary,
    summary="Verify designer",
    description="Mark a designer verified so homeowners can send them requests. Admin only.",
    responses={
        403: {"description": "Admin access required"},
        404: {"description": "Designer not found"},
    },
)
async def verify_designer(
    designer_id: UUID,
    _admin: AdminActor,
    service: DesignerServiceDep,
) -> DesignerSummary:
    designer = await service.verify_designer(designer_id)
    return DesignerSummary.model_validate(designer)
