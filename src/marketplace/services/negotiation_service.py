"""Request/proposal negotiation service - the competitive bidding workflow."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.config import get_settings
from src.marketplace.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from src.marketplace.core.logging import get_logger
from src.marketplace.core.notifications import Notification, NotificationType
from src.marketplace.models import (
    ActivityAction,
    DesignerProfile,
    HomeownerProfile,
    Project,
    ProjectRequest,
    ProjectRole,
    ProjectStatus,
    Proposal,
    ProposalStatus,
    RequestStatus,
)
from src.marketplace.models.transitions import ensure_transition
from src.marketplace.repositories import (
    DesignerProfileRepository,
    HomeownerProfileRepository,
    ProjectRepository,
    ProjectRequestRepository,
    ProposalRepository,
)
from src.marketplace.schemas.negotiation import ProposalCreate
from src.marketplace.services.base import BaseService
from src.marketplace.services.project_service import ProjectService

logger = get_logger(__name__)

OPEN_FOR_REQUESTS = frozenset({ProjectStatus.DRAFT, ProjectStatus.SEEKING_DESIGNER})


@dataclass
class ReceivedRequest:
    """A request as the solicited designer sees it."""

    request: ProjectRequest
    project: Project
    homeowner: HomeownerProfile
    proposal: Proposal | None = None


@dataclass
class ProposalEntry:
    """One request on a project with its designer and proposal, if any."""

    request: ProjectRequest
    designer: DesignerProfile | None
    proposal: Proposal | None = None


def _validate_terms(terms: ProposalCreate) -> None:
    if not terms.scope_description or not terms.scope_description.strip():
        raise ValidationError("scope_description is required")
    if terms.timeline_weeks is None or terms.timeline_weeks <= 0:
        raise ValidationError("timeline_weeks must be greater than 0")
    if terms.cost_estimate is None or terms.cost_estimate < 0:
        raise ValidationError("cost_estimate must be 0 or greater")


class NegotiationService(BaseService):
    """Requests and proposals between a project and its candidate designers.

    Shares the session, access resolver and activity writer of the project
    service it drives, so a cascade and the project transition it causes
    commit as one unit.
    """

    def __init__(self, session: AsyncSession, projects: ProjectService | None = None):
        super().__init__(session)
        self.projects = projects or ProjectService(session)
        self.access = self.projects.access
        self.activity = self.projects.activity
        self.project_repo = ProjectRepository(session)
        self.request_repo = ProjectRequestRepository(session)
        self.proposal_repo = ProposalRepository(session)
        self.designer_repo = DesignerProfileRepository(session)
        self.homeowner_repo = HomeownerProfileRepository(session)

    # Requests

    async def send_request(
        self,
        user_id: UUID,
        project_id: UUID,
        designer_id: UUID,
        message: str | None = None,
    ) -> ProjectRequest:
        """Solicit a designer for a project.

        Opens a draft project to designers as a side effect.

        Raises:
            ForbiddenError: If the caller does not own the project, or the
                designer is not verified
            ValidationError: If the project no longer takes requests
            NotFoundError: If the designer does not exist
            ConflictError: If this designer was already solicited
        """
        async with self.transaction("send_request"):
            access = await self.access.require(
                project_id, user_id, ProjectRole.OWNER, for_update=True
            )
            project = access.project
            if project.status_enum not in OPEN_FOR_REQUESTS:
                raise ValidationError(
                    f"Cannot send requests for a project in {project.status} status"
                )

            designer = await self.designer_repo.get_by_id(designer_id)
            if designer is None:
                raise NotFoundError("Designer not found")
            if not designer.is_verified:
                raise ForbiddenError("Designer is not verified")

            if await self.request_repo.get_for_pair(project.id, designer.id) is not None:
                raise ConflictError("Request already sent to this designer")

            request = ProjectRequest(
                project_id=project.id,
                designer_id=designer.id,
                message=message,
                status=RequestStatus.PENDING.value,
            )
            self.request_repo.add(request)
            try:
                await self.session.flush()
            except IntegrityError as e:
                # Lost the race against a concurrent send for the same pair
                raise ConflictError("Request already sent to this designer") from e

            if project.status_enum is ProjectStatus.DRAFT:
                await self.projects.apply_start_seeking_designer(project, user_id)

            self.activity.record(
                project.id,
                user_id,
                ActivityAction.REQUEST_SENT,
                {
                    "request_id": request.id,
                    "designer_id": designer.id,
                    "to": RequestStatus.PENDING,
                },
            )

        logger.info(
            "Request sent",
            project_id=str(project.id),
            request_id=str(request.id),
            designer_id=str(designer.id),
        )
        self.projects.notify(
            [
                Notification(
                    user_id=designer.user_id,
                    type=NotificationType.REQUEST_RECEIVED,
                    title="New project request",
                    message=project.title,
                    data={"project_id": str(project.id), "request_id": str(request.id)},
                )
            ]
        )
        return request

    async def decline_request(self, user_id: UUID, request_id: UUID) -> ProjectRequest:
        """Decline a pending request without proposing.

        Raises:
            InvalidStateError: If the request is not pending
        """
        async with self.transaction("decline_request"):
            request = await self._get_request(request_id)
            await self.access.require_solicited_designer(request, user_id)
            await self._lock_project_for(request)

            current = request.status_enum
            if current is not RequestStatus.PENDING:
                raise InvalidStateError(f"Cannot decline a request in {current.value} status")
            await self._move_request(request, RequestStatus.REJECTED)

            self.activity.record(
                request.project_id,
                user_id,
                ActivityAction.REQUEST_DECLINED,
                {"request_id": request.id, "from": current, "to": RequestStatus.REJECTED},
            )

        logger.info("Request declined", request_id=str(request.id))
        return request

    # Proposals

    async def submit_proposal(
        self,
        user_id: UUID,
        request_id: UUID,
        terms: ProposalCreate,
    ) -> Proposal:
        """Answer a pending request with a proposal.

        Raises:
            ValidationError: If scope, timeline or cost are missing or invalid
            InvalidStateError: If the request is not pending or the project
                is no longer seeking a designer
            ConflictError: If a proposal already exists for the request
        """
        _validate_terms(terms)

        async with self.transaction("submit_proposal"):
            request = await self._get_request(request_id)
            designer = await self.access.require_solicited_designer(request, user_id)
            project = await self._lock_project_for(request)

            current = request.status_enum
            if current is not RequestStatus.PENDING:
                raise InvalidStateError(
                    f"Cannot submit a proposal for a request in {current.value} status"
                )
            if await self.proposal_repo.get_by_request(request.id) is not None:
                raise ConflictError("Proposal already submitted for this request")

            if project.status_enum is not ProjectStatus.SEEKING_DESIGNER:
                raise InvalidStateError("Project is no longer accepting proposals")

            proposal = Proposal(
                project_request_id=request.id,
                designer_id=designer.id,
                scope_description=terms.scope_description.strip(),
                approach=terms.approach,
                timeline_weeks=terms.timeline_weeks,
                cost_estimate=terms.cost_estimate,
                cost_breakdown=terms.cost_breakdown.model_dump(mode="json"),
                notes=terms.notes,
                status=ProposalStatus.SUBMITTED.value,
            )
            self.proposal_repo.add(proposal)
            try:
                await self.session.flush()
            except IntegrityError as e:
                raise ConflictError("Proposal already submitted for this request") from e

            await self._move_request(request, RequestStatus.PROPOSAL_SUBMITTED)

            self.activity.record(
                project.id,
                user_id,
                ActivityAction.PROPOSAL_SUBMITTED,
                {
                    "request_id": request.id,
                    "proposal_id": proposal.id,
                    "from": current,
                    "to": RequestStatus.PROPOSAL_SUBMITTED,
                    "cost_estimate": proposal.cost_estimate,
                    "timeline_weeks": proposal.timeline_weeks,
                },
            )
            homeowner = await self.homeowner_repo.get_by_id(project.homeowner_id)

        logger.info(
            "Proposal submitted",
            project_id=str(project.id),
            proposal_id=str(proposal.id),
        )
        if homeowner is not None:
            self.projects.notify(
                [
                    Notification(
                        user_id=homeowner.user_id,
                        type=NotificationType.PROPOSAL_RECEIVED,
                        title="New proposal received",
                        message=project.title,
                        data={"project_id": str(project.id), "proposal_id": str(proposal.id)},
                    )
                ]
            )
        return proposal

    async def accept_proposal(self, user_id: UUID, proposal_id: UUID) -> Proposal:
        """Accept one proposal and close the competition.

        In one transaction: the proposal and its request become accepted,
        every other request with a submitted proposal is rejected along with
        its proposal, and the project moves to in_progress with the winning
        designer. Pending siblings are left alone unless
        `auto_reject_pending_requests` is enabled.

        The project row is locked before anything is read for the decision,
        so a competing command on the same project waits for this one and
        then sees its outcome.

        Raises:
            ForbiddenError: If the caller does not own the project
            InvalidStateError: If the proposal was already decided or the
                project cannot take a designer
            ConflictError: If a concurrent command changed any of the rows
        """
        settings = get_settings()
        notifications: list[Notification] = []

        async with self.transaction("accept_proposal"):
            proposal = await self._get_proposal(proposal_id)
            request = await self._get_request(proposal.project_request_id)
            access = await self.access.require(
                request.project_id, user_id, ProjectRole.OWNER, for_update=True
            )
            project = access.project
            await self.session.refresh(proposal)
            await self.session.refresh(request)

            # Validate everything before the first write
            ensure_transition(proposal.status_enum, ProposalStatus.ACCEPTED)
            ensure_transition(request.status_enum, RequestStatus.ACCEPTED)
            ensure_transition(project.status_enum, ProjectStatus.IN_PROGRESS)

            await self._move_proposal(proposal, ProposalStatus.ACCEPTED)
            await self._move_request(request, RequestStatus.ACCEPTED)

            siblings = [
                r for r in await self.request_repo.list_by_project(project.id) if r.id != request.id
            ]
            sibling_proposals = await self.proposal_repo.get_by_requests([r.id for r in siblings])
            rejected_designers: list[UUID] = []

            for sibling in siblings:
                sibling_status = sibling.status_enum
                if sibling_status is RequestStatus.PROPOSAL_SUBMITTED:
                    await self._move_request(sibling, RequestStatus.REJECTED)
                    sibling_proposal = sibling_proposals.get(sibling.id)
                    if (
                        sibling_proposal is not None
                        and sibling_proposal.status_enum is ProposalStatus.SUBMITTED
                    ):
                        await self._move_proposal(sibling_proposal, ProposalStatus.REJECTED)
                    self.activity.record(
                        project.id,
                        None,
                        ActivityAction.PROPOSAL_AUTO_REJECTED,
                        {
                            "request_id": sibling.id,
                            "proposal_id": sibling_proposal.id if sibling_proposal else None,
                            "designer_id": sibling.designer_id,
                            "from": sibling_status,
                            "to": RequestStatus.REJECTED,
                        },
                    )
                    rejected_designers.append(sibling.designer_id)
                elif (
                    sibling_status is RequestStatus.PENDING
                    and settings.auto_reject_pending_requests
                ):
                    await self._move_request(sibling, RequestStatus.REJECTED)
                    self.activity.record(
                        project.id,
                        None,
                        ActivityAction.REQUEST_AUTO_REJECTED,
                        {
                            "request_id": sibling.id,
                            "designer_id": sibling.designer_id,
                            "from": sibling_status,
                            "to": RequestStatus.REJECTED,
                        },
                    )

            await self.projects.apply_assign_designer(project, proposal.designer_id, user_id)

            self.activity.record(
                project.id,
                user_id,
                ActivityAction.PROPOSAL_ACCEPTED,
                {
                    "proposal_id": proposal.id,
                    "request_id": request.id,
                    "designer_id": proposal.designer_id,
                    "from": ProposalStatus.SUBMITTED,
                    "to": ProposalStatus.ACCEPTED,
                },
            )

            designers = await self.designer_repo.get_many(
                [proposal.designer_id, *rejected_designers]
            )
            winner = designers.get(proposal.designer_id)
            if winner is not None:
                notifications.append(
                    Notification(
                        user_id=winner.user_id,
                        type=NotificationType.PROPOSAL_ACCEPTED,
                        title="Your proposal was accepted",
                        message=project.title,
                        data={"project_id": str(project.id), "proposal_id": str(proposal.id)},
                    )
                )
            for designer_id in rejected_designers:
                loser = designers.get(designer_id)
                if loser is not None:
                    notifications.append(
                        Notification(
                            user_id=loser.user_id,
                            type=NotificationType.PROPOSAL_REJECTED,
                            title="Another proposal was selected",
                            message=project.title,
                            data={"project_id": str(project.id)},
                        )
                    )

        logger.info(
            "Proposal accepted",
            project_id=str(project.id),
            proposal_id=str(proposal.id),
            auto_rejected=len(rejected_designers),
        )
        self.projects.notify(notifications)
        return proposal

    async def reject_proposal(
        self,
        user_id: UUID,
        proposal_id: UUID,
        reason: str | None = None,
    ) -> Proposal:
        """Reject a single proposal. Sibling requests are not touched."""
        async with self.transaction("reject_proposal"):
            proposal = await self._get_proposal(proposal_id)
            request = await self._get_request(proposal.project_request_id)
            access = await self.access.require(
                request.project_id, user_id, ProjectRole.OWNER, for_update=True
            )
            await self.session.refresh(proposal)
            await self.session.refresh(request)

            ensure_transition(proposal.status_enum, ProposalStatus.REJECTED)
            request_status = request.status_enum
            ensure_transition(request_status, RequestStatus.REJECTED)

            await self._move_proposal(proposal, ProposalStatus.REJECTED)
            await self._move_request(request, RequestStatus.REJECTED)

            self.activity.record(
                access.project.id,
                user_id,
                ActivityAction.PROPOSAL_REJECTED,
                {
                    "proposal_id": proposal.id,
                    "request_id": request.id,
                    "reason": reason,
                    "from": ProposalStatus.SUBMITTED,
                    "to": ProposalStatus.REJECTED,
                },
            )
            designer = await self.designer_repo.get_by_id(proposal.designer_id)

        logger.info("Proposal rejected", proposal_id=str(proposal.id))
        if designer is not None:
            self.projects.notify(
                [
                    Notification(
                        user_id=designer.user_id,
                        type=NotificationType.PROPOSAL_REJECTED,
                        title="Your proposal was declined",
                        message=access.project.title,
                        data={"project_id": str(access.project.id), "reason": reason},
                    )
                ]
            )
        return proposal

    # Reads

    async def list_project_requests(self, user_id: UUID, project_id: UUID) -> list[ProjectRequest]:
        access = await self.access.require(project_id, user_id, ProjectRole.OWNER)
        return await self.request_repo.list_by_project(access.project.id)

    async def list_designer_requests(
        self,
        user_id: UUID,
        status: RequestStatus | None = None,
    ) -> list[ProjectRequest]:
        designer = await self.designer_repo.get_by_user_id(user_id)
        if designer is None:
            raise NotFoundError("Designer profile not found")
        return await self.request_repo.list_by_designer(
            designer.id, status.value if status else None
        )

    async def get_request_details(self, user_id: UUID, request_id: UUID) -> ReceivedRequest:
        """Request with its project and homeowner, for the solicited designer."""
        request = await self._get_request(request_id)
        await self.access.require_solicited_designer(request, user_id)

        project = await self.project_repo.get_by_id(request.project_id)
        if project is None:
            raise NotFoundError("Project not found")
        homeowner = await self.homeowner_repo.get_by_id(project.homeowner_id)
        if homeowner is None:
            raise NotFoundError("Homeowner profile not found")
        proposal = await self.proposal_repo.get_by_request(request.id)
        return ReceivedRequest(
            request=request, project=project, homeowner=homeowner, proposal=proposal
        )

    async def list_project_proposals(self, user_id: UUID, project_id: UUID) -> list[ProposalEntry]:
        """Every request on the project with its designer and proposal."""
        access = await self.access.require(project_id, user_id, ProjectRole.OWNER)
        requests = await self.request_repo.list_by_project(access.project.id)
        proposals = await self.proposal_repo.get_by_requests([r.id for r in requests])
        designers = await self.designer_repo.get_many(list({r.designer_id for r in requests}))
        return [
            ProposalEntry(
                request=r,
                designer=designers.get(r.designer_id),
                proposal=proposals.get(r.id),
            )
            for r in requests
        ]

    async def get_proposal_for_request(self, user_id: UUID, request_id: UUID) -> Proposal | None:
        """Proposal for a request, visible to the project owner and the designer."""
        request = await self._get_request(request_id)
        designer = await self.designer_repo.get_by_user_id(user_id)
        if designer is None or designer.id != request.designer_id:
            await self.access.require(request.project_id, user_id, ProjectRole.OWNER)
        return await self.proposal_repo.get_by_request(request.id)

    # Helpers

    async def _lock_project_for(self, request: ProjectRequest) -> Project:
        """Lock the request's project, then re-read the request under that lock."""
        project = await self.project_repo.get_for_update(request.project_id)
        if project is None:
            raise NotFoundError("Project not found")
        await self.session.refresh(request)
        return project

    async def _get_request(self, request_id: UUID) -> ProjectRequest:
        request = await self.request_repo.get_by_id(request_id)
        if request is None:
            raise NotFoundError("Request not found")
        return request

    async def _get_proposal(self, proposal_id: UUID) -> Proposal:
        proposal = await self.proposal_repo.get_by_id(proposal_id)
        if proposal is None:
            raise NotFoundError("Proposal not found")
        return proposal

    async def _move_request(self, request: ProjectRequest, target: RequestStatus) -> None:
        current = request.status_enum
        ensure_transition(current, target)
        if not await self.request_repo.transition_status(request, current.value, target.value):
            raise ConflictError("Request status changed concurrently")

    async def _move_proposal(self, proposal: Proposal, target: ProposalStatus) -> None:
        current = proposal.status_enum
        ensure_transition(current, target)
        if not await self.proposal_repo.transition_status(proposal, current.value, target.value):
            raise ConflictError("Proposal status changed concurrently")
