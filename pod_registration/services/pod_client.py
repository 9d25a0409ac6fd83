"""HTTP client for the Pod registration endpoint.

Posts a ``RegistrationPayload`` as JSON and parses the canonical record from
the response. Includes basic Prometheus metrics for request counts and latency.
"""

from __future__ import annotations

import httpx
from prometheus_client import Counter, Histogram

from pod_registration.core.errors import RegistrationFailed
from pod_registration.core.logging import get_logger
from pod_registration.models.schemas import RegisteredService, RegistrationPayload

log = get_logger("PodClient")

POD_REQUESTS = Counter("pod_client_requests_total", "Registration requests sent to the Pod", ["status"])
POD_LATENCY = Histogram("pod_client_latency_seconds", "Pod registration request latency seconds")

REGISTER_PATH = "/api/register"
DEFAULT_FAILURE = "Failed to register service."


def _error_message(resp: httpx.Response) -> str:
    """Server-provided ``message`` of an error response, or a generic one."""
    try:
        body = resp.json()
    except ValueError:
        return f"{DEFAULT_FAILURE} (HTTP {resp.status_code})"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return DEFAULT_FAILURE


class PodClient:
    """
    Tiny HTTP client wrapper for the Pod.

    Holds an httpx.AsyncClient for connection pooling. Registration is sent
    once; a POST is not retried since the Pod would mint a second record.
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str):
        """Create a client with a shared HTTPX AsyncClient and base URL."""
        self._client = client
        self._base = base_url.rstrip("/")

    @property
    def register_url(self) -> str:
        return f"{self._base}{REGISTER_PATH}"

    async def register(self, payload: RegistrationPayload) -> RegisteredService:
        """
        Submit ``payload`` and return the record the Pod created.

        Raises ``RegistrationFailed`` with the server's message on a non-2xx
        answer, or with the transport error when the Pod is unreachable.
        """
        url = self.register_url
        try:
            with POD_LATENCY.time():
                resp = await self._client.post(url, json=payload.to_wire())
        except httpx.HTTPError as e:
            POD_REQUESTS.labels(status="error").inc()
            log.warning("Pod unreachable at %s: %s", url, e)
            raise RegistrationFailed(f"Could not reach the Pod at {url}: {e}") from e

        POD_REQUESTS.labels(status=str(resp.status_code)).inc()
        if not resp.is_success:
            message = _error_message(resp)
            log.warning("Pod refused registration (%s): %s", resp.status_code, message)
            raise RegistrationFailed(message, status_code=resp.status_code)

        try:
            return RegisteredService.model_validate(resp.json())
        except ValueError as e:
            raise RegistrationFailed(f"Unexpected response from the Pod: {e}", status_code=resp.status_code) from e
