"""Domain errors and the exception handlers that render them with request_id."""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.marketplace.core.logging import get_logger

logger = get_logger(__name__)


class MarketplaceError(Exception):
    """Base class for errors raised by the engagement workflow."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error: str = "marketplace_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(MarketplaceError):
    """Referenced project, request, proposal or profile does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"


class ForbiddenError(MarketplaceError):
    """Caller lacks the role the operation requires."""

    status_code = status.HTTP_403_FORBIDDEN
    error = "forbidden"


class InvalidStateError(MarketplaceError):
    """Requested transition is not legal from the entity's current status."""

    status_code = status.HTTP_409_CONFLICT
    error = "invalid_state"


class ConflictError(MarketplaceError):
    """Duplicate record, or a concurrent write won the race."""

    status_code = status.HTTP_409_CONFLICT
    error = "conflict"


class ValidationError(MarketplaceError):
    """Input rejected at the workflow boundary."""

    status_code = 422
    error = "validation_error"


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(MarketplaceError)
    async def marketplace_exception_handler(
        request: Request, exc: MarketplaceError
    ) -> JSONResponse:
        logger.info(
            "Command rejected",
            error=exc.error,
            detail=exc.message,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.message,
                "error": exc.error,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
