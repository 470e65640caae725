"""Unit tests for workflow error responses."""

from uuid import uuid4

import pytest
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.marketplace.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    MarketplaceError,
    NotFoundError,
    ValidationError,
    setup_exception_handlers,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    app.add_middleware(CorrelationIdMiddleware)

    @app.get("/conflict")
    async def conflict() -> None:
        raise ConflictError("Request already sent to this designer")

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("unexpected")

    return app


@pytest.mark.parametrize(
    ("error", "status_code", "code"),
    [
        (NotFoundError, 404, "not_found"),
        (ForbiddenError, 403, "forbidden"),
        (InvalidStateError, 409, "invalid_state"),
        (ConflictError, 409, "conflict"),
        (ValidationError, 422, "validation_error"),
    ],
)
def test_error_codes(error, status_code, code):
    exc = error("message")
    assert isinstance(exc, MarketplaceError)
    assert exc.status_code == status_code
    assert exc.error == code
    assert exc.message == "message"


async def test_domain_error_response(app):
    request_id = uuid4().hex
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/conflict", headers={"X-Request-ID": request_id})

    assert response.status_code == 409
    assert response.json() == {
        "detail": "Request already sent to this designer",
        "error": "conflict",
        "request_id": request_id,
    }


async def test_unhandled_error_is_500(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/boom")

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"
