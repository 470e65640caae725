"""Shared enums for models."""

from enum import Enum


class ProjectStatus(str, Enum):
    """Project lifecycle status."""

    DRAFT = "draft"
    SEEKING_DESIGNER = "seeking_designer"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RequestStatus(str, Enum):
    """Status of a solicitation from a project to one designer."""

    PENDING = "pending"
    PROPOSAL_SUBMITTED = "proposal_submitted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ProposalStatus(str, Enum):
    """Status of a designer's bid."""

    SUBMITTED = "submitted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ProjectScope(str, Enum):
    FULL_HOME = "full_home"
    PARTIAL = "partial"


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    VILLA = "villa"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class MilestoneStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    NOT_PAID = "not_paid"
    PAID = "paid"


class CostCategory(str, Enum):
    DESIGN_FEES = "design_fees"
    LABOR = "labor"
    MATERIALS = "materials"
    MISCELLANEOUS = "miscellaneous"


class ProjectRole(str, Enum):
    """Caller's relationship to a project, resolved per call."""

    OWNER = "owner"
    ASSIGNED_DESIGNER = "assigned_designer"
    NONE = "none"
