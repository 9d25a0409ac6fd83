"""Tunnel providers.

The registration flow only needs the public URL a tunnel hands back. Real
providers (ngrok, playit.gg, Cloudflare Tunnel) live outside this project;
``StaticTunnel`` covers a URL the operator copied by hand and ``MockTunnel``
fakes one for demos and tests.
"""
from __future__ import annotations

import secrets
from typing import Protocol

from pod_registration.core.logging import get_logger

log = get_logger("Tunnel")


class TunnelProvider(Protocol):
    """Exposes a local endpoint and returns its public URL."""

    async def open(self, local_url: str) -> str:
        ...


class StaticTunnel:
    """Returns a public URL supplied up front."""

    def __init__(self, public_url: str):
        self._public_url = public_url.strip()

    async def open(self, local_url: str) -> str:
        return self._public_url


class MockTunnel:
    """Simulated tunnel: ``https://<random id>.<domain>``."""

    def __init__(self, domain: str = "ngrok.io", id_bytes: int = 4):
        self._domain = domain
        self._id_bytes = id_bytes

    async def open(self, local_url: str) -> str:
        url = f"https://{secrets.token_hex(self._id_bytes)}.{self._domain}"
        log.info("mock tunnel %s -> %s", url, local_url)
        return url
