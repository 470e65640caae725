"""Request and proposal schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from src.marketplace.schemas.project import ProjectRead


class RequestCreate(BaseModel):
    designer_id: UUID
    message: str | None = Field(default=None, max_length=2000)


class CostBreakdown(BaseModel):
    design_fees: Decimal = Decimal("0")
    labor: Decimal = Decimal("0")
    materials: Decimal = Decimal("0")
    other: Decimal = Decimal("0")


class ProposalCreate(BaseModel):
    """Proposal terms.

    Required terms (scope, timeline, cost) are checked by the negotiation
    service so direct callers get the same errors as HTTP clients.
    """

    scope_description: str = Field(max_length=5000)
    approach: str | None = Field(default=None, max_length=5000)
    timeline_weeks: int
    cost_estimate: Decimal
    cost_breakdown: CostBreakdown = Field(default_factory=CostBreakdown)
    notes: str | None = Field(default=None, max_length=2000)


class ProposalReject(BaseModel):
    reason: str | None = Field(default=None, max_length=1000)


class RequestRead(BaseModel):
    id: UUID
    project_id: UUID
    designer_id: UUID
    status: str
    message: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProposalRead(BaseModel):
    id: UUID
    project_request_id: UUID
    designer_id: UUID
    scope_description: str
    approach: str | None
    timeline_weeks: int
    cost_estimate: Decimal
    cost_breakdown: dict[str, Any]
    notes: str | None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DesignerSummary(BaseModel):
    id: UUID
    name: str
    firm_name: str | None
    city: str | None
    is_verified: bool

    model_config = {"from_attributes": True}


class HomeownerSummary(BaseModel):
    id: UUID
    name: str
    city: str | None

    model_config = {"from_attributes": True}


class RequestDetails(BaseModel):
    """A received request as the solicited designer sees it."""

    request: RequestRead
    project: ProjectRead
    homeowner: HomeownerSummary
    proposal: ProposalRead | None = None


class ProjectProposalEntry(BaseModel):
    """One request on a project with its proposal, if submitted."""

    request: RequestRead
    designer: DesignerSummary | None
    proposal: ProposalRead | None = None
