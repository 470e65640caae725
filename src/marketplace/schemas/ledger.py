"""Task, milestone and cost estimate schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.marketplace.models.enums import (
    CostCategory,
    MilestoneStatus,
    PaymentStatus,
    TaskStatus,
)


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Title cannot be empty or whitespace only")
    return v


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    assigned_to: UUID | None = None
    due_date: date | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _strip_required(v)


class TaskUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    assigned_to: UUID | None = None
    due_date: date | None = None


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskRead(BaseModel):
    id: UUID
    project_id: UUID
    created_by: UUID
    assigned_to: UUID | None
    title: str
    description: str | None
    status: str
    due_date: date | None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MilestoneCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    target_date: date | None = None
    payment_amount: Decimal | None = Field(default=None, ge=0)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _strip_required(v)


class MilestoneUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    target_date: date | None = None
    payment_amount: Decimal | None = Field(default=None, ge=0)
    order_index: int | None = Field(default=None, ge=0)


class MilestoneStatusUpdate(BaseModel):
    status: MilestoneStatus


class MilestonePaymentUpdate(BaseModel):
    payment_status: PaymentStatus


class MilestoneRead(BaseModel):
    id: UUID
    project_id: UUID
    title: str
    description: str | None
    target_date: date | None
    payment_amount: Decimal | None
    payment_status: str
    paid_at: datetime | None
    status: str
    completed_at: datetime | None
    order_index: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CostEstimateCreate(BaseModel):
    category: CostCategory
    description: str = Field(min_length=1, max_length=500)
    estimated_amount: Decimal = Field(ge=0)
    actual_amount: Decimal | None = Field(default=None, ge=0)


class CostEstimateUpdate(BaseModel):
    category: CostCategory | None = None
    description: str | None = Field(default=None, min_length=1, max_length=500)
    estimated_amount: Decimal | None = Field(default=None, ge=0)
    actual_amount: Decimal | None = Field(default=None, ge=0)


class CostEstimateRead(BaseModel):
    id: UUID
    project_id: UUID
    category: str
    description: str
    estimated_amount: Decimal
    actual_amount: Decimal | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CategoryTotals(BaseModel):
    estimated: Decimal = Decimal("0")
    actual: Decimal = Decimal("0")


class CostSummary(BaseModel):
    total_estimated: Decimal = Decimal("0")
    total_actual: Decimal = Decimal("0")
    by_category: dict[CostCategory, CategoryTotals]


class CostEstimateList(BaseModel):
    items: list[CostEstimateRead]
    summary: CostSummary
