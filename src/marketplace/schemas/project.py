"""Project schemas for API request/response."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.marketplace.models.enums import ProjectScope


class ScopeDetails(BaseModel):
    """Free-form description of what the project covers."""

    rooms: list[str] = Field(default_factory=list)
    areas: list[str] = Field(default_factory=list)
    notes: str | None = Field(default=None, max_length=2000)


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    title: str = Field(min_length=1, max_length=200)
    scope: ProjectScope = ProjectScope.FULL_HOME
    scope_details: ScopeDetails = Field(default_factory=ScopeDetails)
    property_id: UUID | None = None
    budget_min: Decimal | None = Field(default=None, ge=0)
    budget_max: Decimal | None = Field(default=None, ge=0)
    timeline_weeks: int | None = Field(default=None, gt=0)
    start_timeline: str | None = Field(default=None, max_length=50)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Project title cannot be empty or whitespace only")
        return v


class ProjectUpdate(BaseModel):
    """Schema for updating a draft project. Only set fields are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    scope: ProjectScope | None = None
    scope_details: ScopeDetails | None = None
    property_id: UUID | None = None
    budget_min: Decimal | None = Field(default=None, ge=0)
    budget_max: Decimal | None = Field(default=None, ge=0)
    timeline_weeks: int | None = Field(default=None, gt=0)
    start_timeline: str | None = Field(default=None, max_length=50)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Project title cannot be empty or whitespace only")
        return v


class ProjectCancel(BaseModel):
    reason: str | None = Field(default=None, max_length=1000)


class ProjectRead(BaseModel):
    """Schema for reading a project."""

    id: UUID
    homeowner_id: UUID
    designer_id: UUID | None
    property_id: UUID | None
    title: str
    scope: str
    scope_details: dict[str, Any]
    budget_min: Decimal | None
    budget_max: Decimal | None
    timeline_weeks: int | None
    start_timeline: str | None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
