"""Test helpers for driving the workflow the way separate requests would."""

from collections.abc import Awaitable, Callable
from decimal import Decimal
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

from src.marketplace.core.security import create_access_token
from src.marketplace.models import (
    ActivityLog,
    DesignerProfile,
    HomeownerProfile,
    Project,
    ProjectRequest,
    Proposal,
)
from src.marketplace.repositories import ActivityLogRepository
from src.marketplace.schemas.negotiation import CostBreakdown, ProposalCreate
from src.marketplace.schemas.project import ProjectCreate
from src.marketplace.services import NegotiationService, ProjectService

T = TypeVar("T")
M = TypeVar("M", bound=SQLModel)


def auth_headers(user_id: UUID, is_admin: bool = False) -> dict[str, str]:
    token = create_access_token(user_id, is_admin=is_admin)
    return {"Authorization": f"Bearer {token}"}


def proposal_terms(**overrides: Any) -> ProposalCreate:
    data: dict[str, Any] = {
        "scope_description": "Kitchen and living room redesign",
        "approach": "Warm minimal",
        "timeline_weeks": 8,
        "cost_estimate": Decimal("150000.00"),
        "cost_breakdown": CostBreakdown(
            design_fees=Decimal("20000"),
            labor=Decimal("50000"),
            materials=Decimal("70000"),
            other=Decimal("10000"),
        ),
    }
    data.update(overrides)
    return ProposalCreate(**data)


class Workflow:
    """Runs each service command on its own session.

    Mirrors production, where every HTTP request gets a fresh session, so
    tests see exactly what was committed.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def run(self, command: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async with self.session_factory() as session:
            return await command(session)

    async def load(self, model: type[M], id: Any) -> M:
        async with self.session_factory() as session:
            entity = await session.get(model, id)
            assert entity is not None, f"{model.__name__} {id} not found"
            return entity

    async def activity(self, project_id: UUID, limit: int = 100) -> list[ActivityLog]:
        """Activity entries for a project, newest first."""
        async with self.session_factory() as session:
            items, _, _ = await ActivityLogRepository(session).list_by_project(
                project_id, limit=limit
            )
            return items

    async def create_project(self, homeowner: HomeownerProfile, **fields: Any) -> Project:
        data = ProjectCreate(title=fields.pop("title", "Kitchen refresh"), **fields)
        return await self.run(lambda s: ProjectService(s).create_project(homeowner.user_id, data))

    async def send_request(
        self,
        homeowner: HomeownerProfile,
        project: Project,
        designer: DesignerProfile,
    ) -> ProjectRequest:
        return await self.run(
            lambda s: NegotiationService(s).send_request(homeowner.user_id, project.id, designer.id)
        )

    async def submit_proposal(
        self,
        designer: DesignerProfile,
        request: ProjectRequest,
        **overrides: Any,
    ) -> Proposal:
        terms = proposal_terms(**overrides)
        return await self.run(
            lambda s: NegotiationService(s).submit_proposal(designer.user_id, request.id, terms)
        )

    async def accept(self, homeowner: HomeownerProfile, proposal: Proposal) -> Proposal:
        return await self.run(
            lambda s: NegotiationService(s).accept_proposal(homeowner.user_id, proposal.id)
        )

    async def start_in_progress(
        self,
        homeowner: HomeownerProfile,
        designer: DesignerProfile,
        **project_fields: Any,
    ) -> Project:
        """Create a project and take it through acceptance with one designer."""
        project = await self.create_project(homeowner, **project_fields)
        request = await self.send_request(homeowner, project, designer)
        proposal = await self.submit_proposal(designer, request)
        await self.accept(homeowner, proposal)
        return await self.load(Project, project.id)
