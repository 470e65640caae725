"""Model exports.

Import from here: `from src.marketplace.models import Project, ProjectRequest`
"""

from src.marketplace.models.activity import ActivityAction, ActivityLog
from src.marketplace.models.enums import (
    CostCategory,
    MilestoneStatus,
    PaymentStatus,
    ProjectRole,
    ProjectScope,
    ProjectStatus,
    PropertyType,
    ProposalStatus,
    RequestStatus,
    TaskStatus,
)
from src.marketplace.models.ledger import CostEstimate, Milestone, Task
from src.marketplace.models.negotiation import ProjectRequest, Proposal
from src.marketplace.models.profile import DesignerProfile, HomeownerProfile, Property
from src.marketplace.models.project import Project

__all__ = [
    # Enums
    "ActivityAction",
    "CostCategory",
    "MilestoneStatus",
    "PaymentStatus",
    "ProjectRole",
    "ProjectScope",
    "ProjectStatus",
    "PropertyType",
    "ProposalStatus",
    "RequestStatus",
    "TaskStatus",
    # Tables
    "ActivityLog",
    "CostEstimate",
    "DesignerProfile",
    "HomeownerProfile",
    "Milestone",
    "Project",
    "ProjectRequest",
    "Property",
    "Proposal",
    "Task",
]
