from fastapi import APIRouter

from src.marketplace.api.v1 import designers, ledger, negotiation, projects

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(projects.router)
api_router.include_router(negotiation.router)
api_router.include_router(ledger.router)
api_router.include_router(designers.router)
