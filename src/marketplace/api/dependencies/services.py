"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.marketplace.api.dependencies.db import DBSession
from src.marketplace.services import (
    DesignerService,
    LedgerService,
    NegotiationService,
    ProjectService,
)


def get_project_service(session: DBSession) -> ProjectService:
    return ProjectService(session)


def get_negotiation_service(session: DBSession) -> NegotiationService:
    return NegotiationService(session)


def get_ledger_service(session: DBSession) -> LedgerService:
    return LedgerService(session)


def get_designer_service(session: DBSession) -> DesignerService:
    return DesignerService(session)


ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
NegotiationServiceDep = Annotated[NegotiationService, Depends(get_negotiation_service)]
LedgerServiceDep = Annotated[LedgerService, Depends(get_ledger_service)]
DesignerServiceDep = Annotated[DesignerService, Depends(get_designer_service)]
