"""API routes for the Pod registration acceptor.

Exposes ``POST /api/register`` which stamps a submitted payload with an id and
creation time and answers with the canonical record. Nothing is persisted
here; the acceptor may forward records to a configured sink.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from pod_registration.core.errors import MalformedPayloadError, MissingFieldsError
from pod_registration.core.logging import get_logger
from pod_registration.metrics.prometheus import REGISTRATIONS_ACCEPTED, REGISTRATIONS_REJECTED
from pod_registration.models.schemas import FailureResponse, MessageResponse, RegisteredService
from pod_registration.services.acceptor import RegistrationAcceptor

log = get_logger("API")
router = APIRouter()

FAILURE_MESSAGE = "Failed to register service."


def _get_acceptor(request: Request) -> RegistrationAcceptor:
    """Return the app-scoped acceptor, or a fresh one outside the app lifespan."""
    acceptor: Optional[RegistrationAcceptor] = getattr(request.app.state, "acceptor", None)
    if acceptor is None:
        acceptor = RegistrationAcceptor()
    return acceptor


def _failure(error: str) -> JSONResponse:
    body = FailureResponse(message=FAILURE_MESSAGE, error=error)
    return JSONResponse(status_code=500, content=body.model_dump())


@router.post(
    "/api/register",
    status_code=201,
    response_model=RegisteredService,
    responses={400: {"model": MessageResponse}, 500: {"model": FailureResponse}},
)
async def register_service(request: Request):
    """
    Accept a registration payload:
      - 201 with the record (id + createdAt added)
      - 400 when a required field is missing
      - 500 when the body is not JSON, or anything else goes wrong
    """
    acceptor = _get_acceptor(request)
    try:
        try:
            body = await request.json()
        except ValueError as e:
            raise MalformedPayloadError() from e
        record = acceptor.accept(body)
    except MissingFieldsError as e:
        REGISTRATIONS_REJECTED.labels(reason="missing_fields").inc()
        rejection = MessageResponse(message=str(e), missing=e.missing)
        return JSONResponse(status_code=400, content=rejection.model_dump())
    except MalformedPayloadError as e:
        REGISTRATIONS_REJECTED.labels(reason="malformed").inc()
        log.warning("registration with unparseable body from %s", request.client.host if request.client else "unknown")
        return _failure(str(e))
    except Exception as e:
        REGISTRATIONS_REJECTED.labels(reason="internal").inc()
        log.exception("Registration error")
        return _failure(str(e) or e.__class__.__name__)

    REGISTRATIONS_ACCEPTED.inc()
    log.info("accepted %s, token %s...", record.id, record.token[:8])
    return JSONResponse(status_code=201, content=record.to_wire())


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "OK"}


@router.get("/readyz")
async def readyz():
    """Readiness endpoint returning a minimal OK payload."""
    return {"status": "ok"}
