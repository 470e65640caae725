"""Integration tests for requests, proposals and the accept cascade."""

from decimal import Decimal
from uuid import uuid4

import pytest

from src.marketplace.core.config import get_settings
from src.marketplace.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from src.marketplace.models import (
    ActivityAction,
    Project,
    ProjectRequest,
    ProjectStatus,
    Proposal,
    ProposalStatus,
    RequestStatus,
)
from src.marketplace.services import NegotiationService, ProjectService

pytestmark = pytest.mark.integration


class TestSendRequest:
    async def test_first_request_opens_draft_project(
        self, workflow, homeowner, designers, draft_project
    ):
        """Sending from draft moves the project to seeking_designer in the same command."""
        request = await workflow.send_request(homeowner, draft_project, designers[0])

        assert request.status == RequestStatus.PENDING.value
        stored = await workflow.load(Project, draft_project.id)
        assert stored.status == ProjectStatus.SEEKING_DESIGNER.value

        actions = [e.action for e in await workflow.activity(draft_project.id)]
        assert actions == [
            ActivityAction.REQUEST_SENT.value,
            ActivityAction.STATUS_CHANGED.value,
            ActivityAction.PROJECT_CREATED.value,
        ]

    async def test_duplicate_designer_conflicts(
        self, workflow, homeowner, designers, draft_project
    ):
        await workflow.send_request(homeowner, draft_project, designers[0])

        with pytest.raises(ConflictError, match="Request already sent to this designer"):
            await workflow.send_request(homeowner, draft_project, designers[0])

        stored = await workflow.load(Project, draft_project.id)
        assert stored.status == ProjectStatus.SEEKING_DESIGNER.value
        requests = await workflow.run(
            lambda s: NegotiationService(s).list_project_requests(
                homeowner.user_id, draft_project.id
            )
        )
        assert len(requests) == 1

    async def test_unverified_designer_forbidden(
        self, workflow, homeowner, unverified_designer, draft_project
    ):
        """A rejected send leaves the project in draft."""
        with pytest.raises(ForbiddenError, match="Designer is not verified"):
            await workflow.send_request(homeowner, draft_project, unverified_designer)

        stored = await workflow.load(Project, draft_project.id)
        assert stored.status == ProjectStatus.DRAFT.value

    async def test_unknown_designer(self, workflow, homeowner, draft_project):
        with pytest.raises(NotFoundError, match="Designer not found"):
            await workflow.run(
                lambda s: NegotiationService(s).send_request(
                    homeowner.user_id, draft_project.id, uuid4()
                )
            )

    async def test_only_owner_may_send(self, workflow, other_homeowner, designers, draft_project):
        with pytest.raises(ForbiddenError):
            await workflow.run(
                lambda s: NegotiationService(s).send_request(
                    other_homeowner.user_id, draft_project.id, designers[0].id
                )
            )

    async def test_closed_project_rejects_requests(
        self, workflow, homeowner, designers, draft_project
    ):
        await workflow.run(
            lambda s: ProjectService(s).cancel_project(draft_project.id, homeowner.user_id)
        )

        with pytest.raises(ValidationError, match="cancelled"):
            await workflow.send_request(homeowner, draft_project, designers[0])


class TestDeclineRequest:
    async def test_designer_declines_pending(self, workflow, homeowner, designers, draft_project):
        request = await workflow.send_request(homeowner, draft_project, designers[0])

        declined = await workflow.run(
            lambda s: NegotiationService(s).decline_request(designers[0].user_id, request.id)
        )

        assert declined.status == RequestStatus.REJECTED.value
        stored = await workflow.load(ProjectRequest, request.id)
        assert stored.status == RequestStatus.REJECTED.value

    async def test_other_designer_cannot_decline(
        self, workflow, homeowner, designers, draft_project
    ):
        request = await workflow.send_request(homeowner, draft_project, designers[0])

        with pytest.raises(ForbiddenError):
            await workflow.run(
                lambda s: NegotiationService(s).decline_request(designers[1].user_id, request.id)
            )

    async def test_cannot_decline_after_proposing(
        self, workflow, homeowner, designers, draft_project
    ):
        request = await workflow.send_request(homeowner, draft_project, designers[0])
        await workflow.submit_proposal(designers[0], request)

        with pytest.raises(InvalidStateError):
            await workflow.run(
                lambda s: NegotiationService(s).decline_request(designers[0].user_id, request.id)
            )


class TestSubmitProposal:
    async def test_submission_moves_request(self, workflow, homeowner, designers, draft_project):
        request = await workflow.send_request(homeowner, draft_project, designers[0])

        proposal = await workflow.submit_proposal(designers[0], request)

        assert proposal.status == ProposalStatus.SUBMITTED.value
        assert proposal.designer_id == designers[0].id
        assert proposal.cost_breakdown["materials"] == "70000"
        stored = await workflow.load(ProjectRequest, request.id)
        assert stored.status == RequestStatus.PROPOSAL_SUBMITTED.value

        latest = (await workflow.activity(draft_project.id))[0]
        assert latest.action == ActivityAction.PROPOSAL_SUBMITTED.value
        assert latest.detail["to"] == "proposal_submitted"
        assert latest.detail["proposal_id"] == str(proposal.id)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"scope_description": "   "},
            {"timeline_weeks": 0},
            {"cost_estimate": Decimal("-1")},
        ],
    )
    async def test_invalid_terms_rejected(
        self, workflow, homeowner, designers, draft_project, overrides
    ):
        """Invalid terms fail before any write; the request stays pending."""
        request = await workflow.send_request(homeowner, draft_project, designers[0])

        with pytest.raises(ValidationError):
            await workflow.submit_proposal(designers[0], request, **overrides)

        stored = await workflow.load(ProjectRequest, request.id)
        assert stored.status == RequestStatus.PENDING.value

    async def test_second_proposal_rejected(self, workflow, homeowner, designers, draft_project):
        request = await workflow.send_request(homeowner, draft_project, designers[0])
        await workflow.submit_proposal(designers[0], request)

        with pytest.raises(InvalidStateError):
            await workflow.submit_proposal(designers[0], request)

    async def test_only_solicited_designer(self, workflow, homeowner, designers, draft_project):
        request = await workflow.send_request(homeowner, draft_project, designers[0])

        with pytest.raises(ForbiddenError):
            await workflow.submit_proposal(designers[1], request)

    async def test_project_no_longer_seeking(self, workflow, homeowner, designers, draft_project):
        request = await workflow.send_request(homeowner, draft_project, designers[0])
        await workflow.run(
            lambda s: ProjectService(s).cancel_project(draft_project.id, homeowner.user_id)
        )

        with pytest.raises(InvalidStateError, match="no longer accepting proposals"):
            await workflow.submit_proposal(designers[0], request)


class TestAcceptProposal:
    async def test_accept_cascades_to_siblings(self, workflow, homeowner, designers, draft_project):
        """Winner accepted, submitted sibling auto-rejected, pending sibling left alone."""
        d1, d2, d3 = designers
        r1 = await workflow.send_request(homeowner, draft_project, d1)
        r2 = await workflow.send_request(homeowner, draft_project, d2)
        r3 = await workflow.send_request(homeowner, draft_project, d3)
        p1 = await workflow.submit_proposal(d1, r1, cost_estimate=Decimal("120000"))
        p2 = await workflow.submit_proposal(d2, r2, cost_estimate=Decimal("140000"))

        accepted = await workflow.accept(homeowner, p1)
        assert accepted.status == ProposalStatus.ACCEPTED.value

        project = await workflow.load(Project, draft_project.id)
        assert project.status == ProjectStatus.IN_PROGRESS.value
        assert project.designer_id == d1.id

        assert (await workflow.load(ProjectRequest, r1.id)).status == "accepted"
        assert (await workflow.load(Proposal, p1.id)).status == "accepted"
        assert (await workflow.load(ProjectRequest, r2.id)).status == "rejected"
        assert (await workflow.load(Proposal, p2.id)).status == "rejected"
        assert (await workflow.load(ProjectRequest, r3.id)).status == "pending"

        entries = await workflow.activity(draft_project.id)
        auto = [e for e in entries if e.action == ActivityAction.PROPOSAL_AUTO_REJECTED.value]
        assert len(auto) == 1
        assert auto[0].user_id is None
        assert auto[0].detail["request_id"] == str(r2.id)
        assert entries[0].action == ActivityAction.PROPOSAL_ACCEPTED.value
        assert any(e.action == ActivityAction.DESIGNER_ASSIGNED.value for e in entries)

    async def test_auto_reject_pending_when_enabled(
        self, workflow, homeowner, designers, draft_project, monkeypatch
    ):
        monkeypatch.setattr(get_settings(), "auto_reject_pending_requests", True)
        d1, _, d3 = designers
        r1 = await workflow.send_request(homeowner, draft_project, d1)
        r3 = await workflow.send_request(homeowner, draft_project, d3)
        p1 = await workflow.submit_proposal(d1, r1)

        await workflow.accept(homeowner, p1)

        assert (await workflow.load(ProjectRequest, r3.id)).status == "rejected"
        actions = [e.action for e in await workflow.activity(draft_project.id)]
        assert ActivityAction.REQUEST_AUTO_REJECTED.value in actions

    async def test_accept_twice_fails(self, workflow, homeowner, designers, draft_project):
        request = await workflow.send_request(homeowner, draft_project, designers[0])
        proposal = await workflow.submit_proposal(designers[0], request)
        await workflow.accept(homeowner, proposal)

        with pytest.raises(InvalidStateError):
            await workflow.accept(homeowner, proposal)

    async def test_only_owner_accepts(self, workflow, homeowner, designers, draft_project):
        request = await workflow.send_request(homeowner, draft_project, designers[0])
        proposal = await workflow.submit_proposal(designers[0], request)

        with pytest.raises(ForbiddenError):
            await workflow.run(
                lambda s: NegotiationService(s).accept_proposal(designers[0].user_id, proposal.id)
            )

        stored = await workflow.load(Proposal, proposal.id)
        assert stored.status == ProposalStatus.SUBMITTED.value

    async def test_cancelled_project_blocks_accept(
        self, workflow, homeowner, designers, draft_project
    ):
        """A failed accept leaves the proposal and request untouched."""
        request = await workflow.send_request(homeowner, draft_project, designers[0])
        proposal = await workflow.submit_proposal(designers[0], request)
        await workflow.run(
            lambda s: ProjectService(s).cancel_project(draft_project.id, homeowner.user_id)
        )

        with pytest.raises(InvalidStateError):
            await workflow.accept(homeowner, proposal)

        assert (await workflow.load(Proposal, proposal.id)).status == "submitted"
        assert (await workflow.load(ProjectRequest, request.id)).status == "proposal_submitted"


class TestRejectProposal:
    async def test_reject_single_proposal(self, workflow, homeowner, designers, draft_project):
        """Rejecting one proposal leaves the project seeking and siblings untouched."""
        r1 = await workflow.send_request(homeowner, draft_project, designers[0])
        r2 = await workflow.send_request(homeowner, draft_project, designers[1])
        p1 = await workflow.submit_proposal(designers[0], r1)
        p2 = await workflow.submit_proposal(designers[1], r2)

        rejected = await workflow.run(
            lambda s: NegotiationService(s).reject_proposal(
                homeowner.user_id, p1.id, reason="Over budget"
            )
        )

        assert rejected.status == ProposalStatus.REJECTED.value
        assert (await workflow.load(ProjectRequest, r1.id)).status == "rejected"
        assert (await workflow.load(Proposal, p2.id)).status == "submitted"
        project = await workflow.load(Project, draft_project.id)
        assert project.status == ProjectStatus.SEEKING_DESIGNER.value

        latest = (await workflow.activity(draft_project.id))[0]
        assert latest.action == ActivityAction.PROPOSAL_REJECTED.value
        assert latest.detail["reason"] == "Over budget"

    async def test_rejected_proposal_cannot_be_accepted(
        self, workflow, homeowner, designers, draft_project
    ):
        request = await workflow.send_request(homeowner, draft_project, designers[0])
        proposal = await workflow.submit_proposal(designers[0], request)
        await workflow.run(
            lambda s: NegotiationService(s).reject_proposal(homeowner.user_id, proposal.id)
        )

        with pytest.raises(InvalidStateError):
            await workflow.accept(homeowner, proposal)


class TestNegotiationReads:
    async def test_designer_sees_request_details(
        self, workflow, homeowner, designers, draft_project
    ):
        request = await workflow.send_request(homeowner, draft_project, designers[0])
        proposal = await workflow.submit_proposal(designers[0], request)

        details = await workflow.run(
            lambda s: NegotiationService(s).get_request_details(designers[0].user_id, request.id)
        )

        assert details.request.id == request.id
        assert details.project.id == draft_project.id
        assert details.homeowner.id == homeowner.id
        assert details.proposal is not None
        assert details.proposal.id == proposal.id

    async def test_designer_request_inbox(self, workflow, homeowner, designers, draft_project):
        request = await workflow.send_request(homeowner, draft_project, designers[0])

        pending = await workflow.run(
            lambda s: NegotiationService(s).list_designer_requests(
                designers[0].user_id, RequestStatus.PENDING
            )
        )
        assert [r.id for r in pending] == [request.id]

        others = await workflow.run(
            lambda s: NegotiationService(s).list_designer_requests(designers[1].user_id)
        )
        assert others == []

    async def test_owner_compares_proposals(self, workflow, homeowner, designers, draft_project):
        r1 = await workflow.send_request(homeowner, draft_project, designers[0])
        await workflow.send_request(homeowner, draft_project, designers[1])
        p1 = await workflow.submit_proposal(designers[0], r1)

        entries = await workflow.run(
            lambda s: NegotiationService(s).list_project_proposals(
                homeowner.user_id, draft_project.id
            )
        )

        by_request = {e.request.id: e for e in entries}
        assert len(by_request) == 2
        assert by_request[r1.id].proposal.id == p1.id
        assert by_request[r1.id].designer.id == designers[0].id
        assert sum(1 for e in entries if e.proposal is None) == 1

    async def test_proposal_visible_to_owner_and_designer_only(
        self, workflow, homeowner, other_homeowner, designers, draft_project
    ):
        request = await workflow.send_request(homeowner, draft_project, designers[0])
        proposal = await workflow.submit_proposal(designers[0], request)

        for user_id in (homeowner.user_id, designers[0].user_id):
            seen = await workflow.run(
                lambda s, uid=user_id: NegotiationService(s).get_proposal_for_request(
                    uid, request.id
                )
            )
            assert seen.id == proposal.id

        with pytest.raises(ForbiddenError):
            await workflow.run(
                lambda s: NegotiationService(s).get_proposal_for_request(
                    other_homeowner.user_id, request.id
                )
            )


# Each case runs one command and returns (action, model, row id, detail key)
# identifying the entry it wrote and the row whose status that entry reports.


async def _send(workflow, homeowner, designers, project, monkeypatch):
    request = await workflow.send_request(homeowner, project, designers[0])
    return ActivityAction.REQUEST_SENT, ProjectRequest, request.id, "request_id"


async def _decline(workflow, homeowner, designers, project, monkeypatch):
    request = await workflow.send_request(homeowner, project, designers[0])
    await workflow.run(
        lambda s: NegotiationService(s).decline_request(designers[0].user_id, request.id)
    )
    return ActivityAction.REQUEST_DECLINED, ProjectRequest, request.id, "request_id"


async def _submit(workflow, homeowner, designers, project, monkeypatch):
    request = await workflow.send_request(homeowner, project, designers[0])
    await workflow.submit_proposal(designers[0], request)
    return ActivityAction.PROPOSAL_SUBMITTED, ProjectRequest, request.id, "request_id"


async def _accept(workflow, homeowner, designers, project, monkeypatch):
    request = await workflow.send_request(homeowner, project, designers[0])
    proposal = await workflow.submit_proposal(designers[0], request)
    await workflow.accept(homeowner, proposal)
    return ActivityAction.PROPOSAL_ACCEPTED, Proposal, proposal.id, "proposal_id"


async def _reject(workflow, homeowner, designers, project, monkeypatch):
    request = await workflow.send_request(homeowner, project, designers[0])
    proposal = await workflow.submit_proposal(designers[0], request)
    await workflow.run(
        lambda s: NegotiationService(s).reject_proposal(homeowner.user_id, proposal.id)
    )
    return ActivityAction.PROPOSAL_REJECTED, Proposal, proposal.id, "proposal_id"


async def _sibling_auto_rejected(workflow, homeowner, designers, project, monkeypatch):
    r1 = await workflow.send_request(homeowner, project, designers[0])
    r2 = await workflow.send_request(homeowner, project, designers[1])
    p1 = await workflow.submit_proposal(designers[0], r1)
    await workflow.submit_proposal(designers[1], r2)
    await workflow.accept(homeowner, p1)
    return ActivityAction.PROPOSAL_AUTO_REJECTED, ProjectRequest, r2.id, "request_id"


async def _pending_auto_rejected(workflow, homeowner, designers, project, monkeypatch):
    monkeypatch.setattr(get_settings(), "auto_reject_pending_requests", True)
    r1 = await workflow.send_request(homeowner, project, designers[0])
    r2 = await workflow.send_request(homeowner, project, designers[1])
    p1 = await workflow.submit_proposal(designers[0], r1)
    await workflow.accept(homeowner, p1)
    return ActivityAction.REQUEST_AUTO_REJECTED, ProjectRequest, r2.id, "request_id"


@pytest.mark.parametrize(
    "command",
    [
        pytest.param(_send, id="send"),
        pytest.param(_decline, id="decline"),
        pytest.param(_submit, id="submit"),
        pytest.param(_accept, id="accept"),
        pytest.param(_reject, id="reject"),
        pytest.param(_sibling_auto_rejected, id="sibling-auto-rejected"),
        pytest.param(_pending_auto_rejected, id="pending-auto-rejected"),
    ],
)
async def test_activity_reports_new_status(
    workflow, homeowner, designers, draft_project, monkeypatch, command
):
    """The entry a command writes names the status the row now holds."""
    action, model, row_id, key = await command(
        workflow, homeowner, designers, draft_project, monkeypatch
    )

    entries = [
        e
        for e in await workflow.activity(draft_project.id)
        if e.action == action.value and e.detail.get(key) == str(row_id)
    ]
    assert entries, f"no {action.value} entry for {row_id}"
    stored = await workflow.load(model, row_id)
    assert entries[0].detail["to"] == stored.status
