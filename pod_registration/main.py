"""Pod registration FastAPI application.

Creates the acceptor service, wires routes, configures logging, and exposes
health and Prometheus metrics endpoints.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from pod_registration.api.routes import router
from pod_registration.core.logging import setup_logging
from pod_registration.metrics.prometheus import metrics_router
from pod_registration.services.acceptor import RegistrationAcceptor


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan.

    Initializes logging and the app-scoped acceptor used by the routes.
    """
    setup_logging()
    if getattr(app.state, "acceptor", None) is None:
        app.state.acceptor = RegistrationAcceptor()
    yield


def create_app(acceptor: RegistrationAcceptor | None = None) -> FastAPI:
    """Build the app; tests pass their own acceptor (deterministic ids, sinks)."""
    application = FastAPI(title="Pod Registration", version="0.1.0", lifespan=lifespan)
    application.include_router(router)
    application.include_router(metrics_router)
    if acceptor is not None:
        application.state.acceptor = acceptor
    return application


app = create_app()
