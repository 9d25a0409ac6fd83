"""Identifier and clock capabilities injected into the validator and acceptor."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable

# Zero-arg callable returning a fresh, practically-unique string.
IdGenerator = Callable[[], str]
Clock = Callable[[], datetime]


def new_uuid() -> str:
    """Random UUID4 (122 random bits) in canonical dashed form."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
