"""FastAPI dependency injection definitions."""

from src.marketplace.api.dependencies.auth import (
    Actor,
    AdminActor,
    CurrentActor,
    get_current_actor,
    require_admin,
)
from src.marketplace.api.dependencies.db import DBSession, get_db_session
from src.marketplace.api.dependencies.services import (
    DesignerServiceDep,
    LedgerServiceDep,
    NegotiationServiceDep,
    ProjectServiceDep,
    get_designer_service,
    get_ledger_service,
    get_negotiation_service,
    get_project_service,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "Actor",
    "AdminActor",
    "CurrentActor",
    "get_current_actor",
    "require_admin",
    # Services
    "DesignerServiceDep",
    "LedgerServiceDep",
    "NegotiationServiceDep",
    "ProjectServiceDep",
    "get_designer_service",
    "get_ledger_service",
    "get_negotiation_service",
    "get_project_service",
]
