"""Repository layer - data access abstraction."""

from src.marketplace.repositories.activity import ActivityLogRepository
from src.marketplace.repositories.base import BaseRepository
from src.marketplace.repositories.ledger import (
    CostEstimateRepository,
    MilestoneRepository,
    TaskRepository,
)
from src.marketplace.repositories.negotiation import (
    ProjectRequestRepository,
    ProposalRepository,
)
from src.marketplace.repositories.profile import (
    DesignerProfileRepository,
    HomeownerProfileRepository,
    PropertyRepository,
)
from src.marketplace.repositories.project import ProjectRepository

__all__ = [
    "ActivityLogRepository",
    "BaseRepository",
    "CostEstimateRepository",
    "DesignerProfileRepository",
    "HomeownerProfileRepository",
    "MilestoneRepository",
    "ProjectRepository",
    "ProjectRequestRepository",
    "PropertyRepository",
    "ProposalRepository",
    "TaskRepository",
]
