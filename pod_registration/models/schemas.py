"""Pydantic models for service registration against the Pod."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceType(str, Enum):
    """Kinds of service an operator can register."""
    WEBSITE = "website"
    API = "api"
    GAME = "game"
    OTHER = "other"


class ServiceDescription(BaseModel):
    """Raw form input, before any validation.

    Every field is a loose optional string so that whatever the operator typed
    can be represented; the validator decides what is acceptable.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    description: Optional[str] = None
    local_endpoint: Optional[str] = Field(None, alias="localEndpoint")
    domain: Optional[str] = None
    service_type: Optional[str] = Field(None, alias="serviceType")
    custom_type: Optional[str] = Field(None, alias="customType")  # only read when service_type is "other"
    public_url: Optional[str] = Field(None, alias="publicUrl")


class FieldError(BaseModel):
    """One offending field and a human-readable reason."""
    field: str
    message: str


class RegistrationPayload(BaseModel):
    """Wire payload posted to the acceptor."""
    name: str
    description: Optional[str] = None
    local_url: str
    domain: Optional[str] = None
    type: str  # resolved: never the literal "other"
    public_url: str
    token: str

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class RegisteredService(RegistrationPayload):
    """Canonical record returned by the acceptor. Immutable once built."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    created_at: datetime = Field(alias="createdAt")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MessageResponse(BaseModel):
    """Body of a 400 rejection."""
    message: str
    missing: Optional[list[str]] = None


class FailureResponse(BaseModel):
    """Body of a 500 failure."""
    message: str
    error: str
