from src.marketplace.services.access_service import AccessResolver, ProjectAccess
from src.marketplace.services.activity_service import ActivityLogWriter
from src.marketplace.services.designer_service import DesignerService
from src.marketplace.services.ledger_service import LedgerService
from src.marketplace.services.negotiation_service import NegotiationService
from src.marketplace.services.project_service import ProjectService

__all__ = [
    "AccessResolver",
    "ActivityLogWriter",
    "DesignerService",
    "LedgerService",
    "NegotiationService",
    "ProjectAccess",
    "ProjectService",
]
