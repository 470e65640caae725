"""Request and proposal models - the competitive bidding records."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.marketplace.models.base import UtcDateTime, utc_now
from src.marketplace.models.enums import ProposalStatus, RequestStatus


class ProjectRequest(SQLModel, table=True):
    """A solicitation from one project to one designer."""

    __tablename__ = "project_requests"
    __table_args__ = (
        UniqueConstraint("project_id", "designer_id", name="uq_project_requests_project_designer"),
        Index("ix_project_requests_project_status", "project_id", "status"),
        Index("ix_project_requests_designer_status", "designer_id", "status"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id")
    designer_id: UUID = Field(foreign_key="designer_profiles.id")
    status: str = Field(default=RequestStatus.PENDING.value, max_length=30)
    message: str | None = Field(default=None, max_length=2000)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)

    @property
    def status_enum(self) -> RequestStatus:
        return RequestStatus(self.status)


class Proposal(SQLModel, table=True):
    """A designer's bid in response to exactly one request."""

    __tablename__ = "proposals"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_request_id: UUID = Field(foreign_key="project_requests.id", unique=True)
    designer_id: UUID = Field(foreign_key="designer_profiles.id", index=True)

    scope_description: str = Field(max_length=5000)
    approach: str | None = Field(default=None, max_length=5000)
    timeline_weeks: int
    cost_estimate: Decimal = Field(max_digits=12, decimal_places=2)
    # design_fees, labor, materials, other
    cost_breakdown: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON().with_variant(JSONB, "postgresql"), nullable=False),
    )
    notes: str | None = Field(default=None, max_length=2000)

    status: str = Field(default=ProposalStatus.SUBMITTED.value, max_length=30)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)

    @property
    def status_enum(self) -> ProposalStatus:
        return ProposalStatus(self.status)
