"""Project model - a homeowner's engagement unit."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.marketplace.models.base import UtcDateTime, utc_now
from src.marketplace.models.enums import ProjectScope, ProjectStatus


class Project(SQLModel, table=True):
    """Root of the engagement workflow.

    `designer_id` is only set once a proposal has been accepted. Projects are
    never deleted; they end in `completed` or `cancelled`.
    """

    __tablename__ = "projects"
    __table_args__ = (
        Index("ix_projects_homeowner_updated", "homeowner_id", "updated_at"),
        Index("ix_projects_designer_updated", "designer_id", "updated_at"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    homeowner_id: UUID = Field(foreign_key="homeowner_profiles.id")
    designer_id: UUID | None = Field(default=None, foreign_key="designer_profiles.id")
    property_id: UUID | None = Field(default=None, foreign_key="properties.id")

    title: str = Field(max_length=200)
    scope: str = Field(default=ProjectScope.FULL_HOME.value, max_length=20)
    # rooms, areas, notes
    scope_details: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON().with_variant(JSONB, "postgresql"), nullable=False),
    )
    budget_min: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    budget_max: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    timeline_weeks: int | None = Field(default=None)
    start_timeline: str | None = Field(default=None, max_length=50)

    status: str = Field(default=ProjectStatus.DRAFT.value, max_length=30, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)

    @property
    def status_enum(self) -> ProjectStatus:
        """Get status as ProjectStatus enum."""
        return ProjectStatus(self.status)
