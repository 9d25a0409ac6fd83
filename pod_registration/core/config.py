"""Configuration for the Pod registration service.

Provides strongly-typed settings using Pydantic and a loader from environment
variables with defaults suitable for local development.
"""

from __future__ import annotations

import os
from typing import cast

from pydantic import AnyUrl, BaseModel, ValidationError


class Settings(BaseModel):
    """Pydantic settings shared by the acceptor app and the CLI."""
    # Base URL of the Pod; the client posts to {pod_url}/api/register
    pod_url: AnyUrl
    request_timeout_s: float = 5.0
    token_file: str | None = None
    host: str = "127.0.0.1"
    port: int = 9002


def load_settings() -> Settings:
    """Load settings from environment variables and return a Settings object."""
    try:
        return Settings(
            pod_url=cast(AnyUrl, os.getenv("POD_URL", "http://localhost:9002")),
            request_timeout_s=float(os.getenv("REQUEST_TIMEOUT_S", "5.0")),
            token_file=os.getenv("TOKEN_FILE"),
            host=os.getenv("POD_HOST", "127.0.0.1"),
            port=int(os.getenv("POD_PORT", "9002")),
        )
    except (ValidationError, ValueError) as e:
        raise RuntimeError(f"Invalid configuration: {e}") from e


settings = load_settings()
