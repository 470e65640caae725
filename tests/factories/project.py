"""Project, request and proposal factories."""

from decimal import Decimal

from polyfactory import Use

from src.marketplace.models import (
    Project,
    ProjectRequest,
    ProjectScope,
    ProjectStatus,
    Proposal,
    ProposalStatus,
    RequestStatus,
)
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class ProjectFactory(BaseFactory):
    """Draft projects; pass homeowner_id explicitly."""

    __model__ = Project

    id = Use(generate_uuid)
    designer_id = None
    property_id = None
    title = Use(lambda: f"Renovation {generate_uuid().hex[-6:]}")
    scope = ProjectScope.FULL_HOME.value
    scope_details = Use(lambda: {"rooms": ["kitchen"], "areas": [], "notes": None})
    budget_min = Decimal("100000.00")
    budget_max = Decimal("250000.00")
    timeline_weeks = 12
    start_timeline = "next_month"
    status = ProjectStatus.DRAFT.value
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def with_status(cls, status: ProjectStatus, **kwargs):
        return cls.build(status=status.value, **kwargs)


class ProjectRequestFactory(BaseFactory):
    __model__ = ProjectRequest

    id = Use(generate_uuid)
    status = RequestStatus.PENDING.value
    message = "Would love your input on this"
    created_at = Use(utc_now)
    updated_at = Use(utc_now)


class ProposalFactory(BaseFactory):
    __model__ = Proposal

    id = Use(generate_uuid)
    scope_description = "Full redesign of kitchen and living room"
    approach = "Modern minimal"
    timeline_weeks = 10
    cost_estimate = Decimal("180000.00")
    cost_breakdown = Use(
        lambda: {"design_fees": "30000", "labor": "60000", "materials": "80000", "other": "10000"}
    )
    notes = None
    status = ProposalStatus.SUBMITTED.value
    created_at = Use(utc_now)
    updated_at = Use(utc_now)
