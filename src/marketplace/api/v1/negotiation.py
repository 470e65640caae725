"""Request and proposal endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.marketplace.api.dependencies import CurrentActor, NegotiationServiceDep
from src.marketplace.models import RequestStatus
from src.marketplace.schemas.negotiation import (
    ProjectProposalEntry,
    ProposalCreate,
    ProposalRead,
    ProposalReject,
    RequestCreate,
    RequestDetails,
    RequestRead,
)

router = APIRouter(tags=["negotiation"])


@router.post(
    "/projects/{project_id}/requests",
    response_model=RequestRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send request",
    description="Solicit a verified designer. Opens a draft project to designers.",
    responses={
        403: {"description": "Not the owner, or designer not verified"},
        404: {"description": "Project or designer not found"},
        409: {"description": "Request already sent to this designer"},
        422: {"description": "Project no longer takes requests"},
    },
)
async def send_request(
    project_id: UUID,
    body: RequestCreate,
    actor: CurrentActor,
    service: NegotiationServiceDep,
) -> RequestRead:
    request = await service.send_request(
        actor.user_id, project_id, body.designer_id, body.message
    )
    return RequestRead.model_validate(request)


@router.get(
    "/projects/{project_id}/requests",
    response_model=list[RequestRead],
    summary="List project requests",
)
async def list_project_requests(
    project_id: UUID,
    actor: CurrentActor,
    service: NegotiationServiceDep,
) -> list[RequestRead]:
    requests = await service.list_project_requests(actor.user_id, project_id)
    return [RequestRead.model_validate(r) for r in requests]


@router.get(
    "/projects/{project_id}/proposals",
    response_model=list[ProjectProposalEntry],
    summary="Compare proposals",
    description="Every request on the project with its designer and proposal, if any.",
)
async def list_project_proposals(
    project_id: UUID,
    actor: CurrentActor,
    service: NegotiationServiceDep,
) -> list[ProjectProposalEntry]:
    entries = await service.list_project_proposals(actor.user_id, project_id)
    return [ProjectProposalEntry.model_validate(e, from_attributes=True) for e in entries]


@router.get(
    "/requests",
    response_model=list[RequestRead],
    summary="List received requests",
    description="Requests sent to the calling designer, newest first.",
)
async def list_designer_requests(
    actor: CurrentActor,
    service: NegotiationServiceDep,
    request_status: Annotated[RequestStatus | None, Query(alias="status")] = None,
) -> list[RequestRead]:
    requests = await service.list_designer_requests(actor.user_id, request_status)
    return [RequestRead.model_validate(r) for r in requests]


@router.get(
    "/requests/{request_id}",
    response_model=RequestDetails,
    summary="Get request details",
)
async def get_request_details(
    request_id: UUID,
    actor: CurrentActor,
    service: NegotiationServiceDep,
) -> RequestDetails:
    details = await service.get_request_details(actor.user_id, request_id)
    return RequestDetails.model_validate(details, from_attributes=True)


@router.post(
    "/requests/{request_id}/decline",
    response_model=RequestRead,
    summary="Decline request",
    responses={409: {"description": "Request is not pending"}},
)
async def decline_request(
    request_id: UUID,
    actor: CurrentActor,
    service: NegotiationServiceDep,
) -> RequestRead:
    request = await service.decline_request(actor.user_id, request_id)
    return RequestRead.model_validate(request)


@router.post(
    "/requests/{request_id}/proposal",
    response_model=ProposalRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit proposal",
    responses={
        409: {"description": "Request is not pending or already has a proposal"},
        422: {"description": "Missing or invalid proposal terms"},
    },
)
async def submit_proposal(
    request_id: UUID,
    body: ProposalCreate,
    actor: CurrentActor,
    service: NegotiationServiceDep,
) -> ProposalRead:
    proposal = await service.submit_proposal(actor.user_id, request_id, body)
    return ProposalRead.model_validate(proposal)


@router.get(
    "/requests/{request_id}/proposal",
    response_model=ProposalRead | None,
    summary="Get proposal for request",
)
async def get_proposal_for_request(
    request_id: UUID,
    actor: CurrentActor,
    service: NegotiationServiceDep,
) -> ProposalRead | None:
    proposal = await service.get_proposal_for_request(actor.user_id, request_id)
    return ProposalRead.model_validate(proposal) if proposal else None


@router.post(
    "/proposals/{proposal_id}/accept",
    response_model=ProposalRead,
    summary="Accept proposal",
    description=(
        "Accept one proposal: rejects competing submitted proposals and moves "
        "the project to in_progress with this designer."
    ),
    responses={
        403: {"description": "Not the project owner"},
        409: {"description": "Proposal already decided, or a concurrent change won"},
    },
)
async def accept_proposal(
    proposal_id: UUID,
    actor: CurrentActor,
    service: NegotiationServiceDep,
) -> ProposalRead:
    proposal = await service.accept_proposal(actor.user_id, proposal_id)
    return ProposalRead.model_validate(proposal)


@router.post(
    "/proposals/{proposal_id}/reject",
    response_model=ProposalRead,
    summary="Reject proposal",
)
async def reject_proposal(
    proposal_id: UUID,
    actor: CurrentActor,
    service: NegotiationServiceDep,
    body: ProposalReject | None = None,
) -> ProposalRead:
    proposal = await service.reject_proposal(
        actor.user_id, proposal_id, body.reason if body else None
    )
    return ProposalRead.model_validate(proposal)
