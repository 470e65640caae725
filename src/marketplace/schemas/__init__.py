from src.marketplace.schemas.activity import ActivityLogRead
from src.marketplace.schemas.ledger import (
    CostEstimateCreate,
    CostEstimateList,
    CostEstimateRead,
    CostEstimateUpdate,
    CostSummary,
    MilestoneCreate,
    MilestonePaymentUpdate,
    MilestoneRead,
    MilestoneStatusUpdate,
    MilestoneUpdate,
    TaskCreate,
    TaskRead,
    TaskStatusUpdate,
    TaskUpdate,
)
from src.marketplace.schemas.negotiation import (
    ProjectProposalEntry,
    ProposalCreate,
    ProposalRead,
    ProposalReject,
    RequestCreate,
    RequestDetails,
    RequestRead,
)
from src.marketplace.schemas.pagination import PaginatedResponse
from src.marketplace.schemas.project import (
    ProjectCancel,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
)

__all__ = [
    "ActivityLogRead",
    "CostEstimateCreate",
    "CostEstimateList",
    "CostEstimateRead",
    "CostEstimateUpdate",
    "CostSummary",
    "MilestoneCreate",
    "MilestonePaymentUpdate",
    "MilestoneRead",
    "MilestoneStatusUpdate",
    "MilestoneUpdate",
    "PaginatedResponse",
    "ProjectCancel",
    "ProjectCreate",
    "ProjectProposalEntry",
    "ProjectRead",
    "ProjectUpdate",
    "ProposalCreate",
    "ProposalRead",
    "ProposalReject",
    "RequestCreate",
    "RequestDetails",
    "RequestRead",
    "TaskCreate",
    "TaskRead",
    "TaskStatusUpdate",
    "TaskUpdate",
]
