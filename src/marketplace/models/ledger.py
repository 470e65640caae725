"""Execution-phase records attached to an in-progress project."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from src.marketplace.models.base import UtcDateTime, utc_now
from src.marketplace.models.enums import (
    CostCategory,
    MilestoneStatus,
    PaymentStatus,
    TaskStatus,
)


class Task(SQLModel, table=True):
    __tablename__ = "tasks"
    __table_args__ = (Index("ix_tasks_project_created", "project_id", "created_at"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id")
    created_by: UUID  # user id of the creator
    assigned_to: UUID | None = Field(default=None)
    title: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    status: str = Field(default=TaskStatus.TODO.value, max_length=20)
    due_date: date | None = Field(default=None)
    completed_at: datetime | None = Field(default=None, sa_type=UtcDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)


class Milestone(SQLModel, table=True):
    """Project milestone with an independent payment status."""

    __tablename__ = "milestones"
    __table_args__ = (Index("ix_milestones_project_order", "project_id", "order_index"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id")
    title: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    target_date: date | None = Field(default=None)
    payment_amount: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    payment_status: str = Field(default=PaymentStatus.NOT_PAID.value, max_length=20)
    paid_at: datetime | None = Field(default=None, sa_type=UtcDateTime)
    status: str = Field(default=MilestoneStatus.PENDING.value, max_length=20)
    completed_at: datetime | None = Field(default=None, sa_type=UtcDateTime)
    order_index: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)


class CostEstimate(SQLModel, table=True):
    __tablename__ = "cost_estimates"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    category: str = Field(default=CostCategory.MISCELLANEOUS.value, max_length=30)
    description: str = Field(max_length=500)
    estimated_amount: Decimal = Field(max_digits=12, decimal_places=2)
    actual_amount: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
