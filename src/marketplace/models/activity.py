"""Append-only activity log for project timelines."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.marketplace.models.base import UtcDateTime, utc_now


class ActivityAction(str, Enum):
    """Activity action tags for type-safe logging."""

    # Project lifecycle
    PROJECT_CREATED = "project_created"
    PROJECT_UPDATED = "project_updated"
    STATUS_CHANGED = "status_changed"
    DESIGNER_ASSIGNED = "designer_assigned"
    PROJECT_CANCELLED = "project_cancelled"

    # Negotiation
    REQUEST_SENT = "request_sent"
    REQUEST_DECLINED = "request_declined"
    REQUEST_AUTO_REJECTED = "request_auto_rejected"
    PROPOSAL_SUBMITTED = "proposal_submitted"
    PROPOSAL_ACCEPTED = "proposal_accepted"
    PROPOSAL_REJECTED = "proposal_rejected"
    PROPOSAL_AUTO_REJECTED = "proposal_auto_rejected"

    # Ledger
    TASK_CREATED = "task_created"
    TASK_STATUS_CHANGED = "task_status_changed"
    TASK_UPDATED = "task_updated"
    TASK_DELETED = "task_deleted"
    MILESTONE_CREATED = "milestone_created"
    MILESTONE_STATUS_CHANGED = "milestone_status_changed"
    MILESTONE_UPDATED = "milestone_updated"
    PAYMENT_STATUS_CHANGED = "payment_status_changed"
    MILESTONE_DELETED = "milestone_deleted"
    COST_ESTIMATE_ADDED = "cost_estimate_added"
    COST_ESTIMATE_UPDATED = "cost_estimate_updated"
    COST_ESTIMATE_DELETED = "cost_estimate_deleted"


class ActivityLog(SQLModel, table=True):
    """Immutable timeline entry.

    The integer primary key gives a total creation order even when two
    entries share a timestamp.
    """

    __tablename__ = "activity_logs"
    __table_args__ = (Index("ix_activity_logs_project_id_id", "project_id", "id"),)

    id: int | None = Field(default=None, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id")
    user_id: UUID | None = Field(default=None)  # None for system-generated entries
    action: str = Field(max_length=50)  # ActivityAction value
    detail: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON().with_variant(JSONB, "postgresql"), nullable=False),
    )
    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
