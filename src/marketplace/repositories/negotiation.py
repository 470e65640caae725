"""Repositories for requests and proposals."""

from uuid import UUID

from sqlmodel import col, select

from src.marketplace.models import ProjectRequest, Proposal
from src.marketplace.repositories.base import BaseRepository


class ProjectRequestRepository(BaseRepository[ProjectRequest]):
    model = ProjectRequest

    async def get_for_pair(self, project_id: UUID, designer_id: UUID) -> ProjectRequest | None:
        """Get the request a project sent to a designer, if any."""
        result = await self.session.execute(
            select(ProjectRequest).where(
                ProjectRequest.project_id == project_id,
                ProjectRequest.designer_id == designer_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_project(
        self,
        project_id: UUID,
        status: str | None = None,
    ) -> list[ProjectRequest]:
        """List a project's requests, newest first."""
        query = select(ProjectRequest).where(ProjectRequest.project_id == project_id)
        if status:
            query = query.where(ProjectRequest.status == status)
        result = await self.session.execute(
            query.order_by(col(ProjectRequest.created_at).desc())
        )
        return list(result.scalars().all())

    async def list_by_designer(
        self,
        designer_id: UUID,
        status: str | None = None,
    ) -> list[ProjectRequest]:
        """List requests received by a designer, newest first."""
        query = select(ProjectRequest).where(ProjectRequest.designer_id == designer_id)
        if status:
            query = query.where(ProjectRequest.status == status)
        result = await self.session.execute(
            query.order_by(col(ProjectRequest.created_at).desc())
        )
        return list(result.scalars().all())


class ProposalRepository(BaseRepository[Proposal]):
    model = Proposal

    async def get_by_request(self, request_id: UUID) -> Proposal | None:
        result = await self.session.execute(
            select(Proposal).where(Proposal.project_request_id == request_id)
        )
        return result.scalar_one_or_none()

    async def get_by_requests(self, request_ids: list[UUID]) -> dict[UUID, Proposal]:
        """Load the proposals for several requests, keyed by request id."""
        if not request_ids:
            return {}
        result = await self.session.execute(
            select(Proposal).where(col(Proposal.project_request_id).in_(request_ids))
        )
        return {proposal.project_request_id: proposal for proposal in result.scalars().all()}
