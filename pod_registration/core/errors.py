"""Exceptions raised by the validator, the acceptor and the Pod client."""
from __future__ import annotations

from typing import Sequence

from pod_registration.models.schemas import FieldError, RegisteredService

REQUIRED_FIELDS: tuple[str, ...] = ("name", "local_url", "type", "public_url", "token")


class DescriptionInvalid(Exception):
    """A service description failed one or more field rules."""

    def __init__(self, errors: Sequence[FieldError]):
        self.errors = list(errors)
        fields = ", ".join(e.field for e in self.errors)
        super().__init__(f"Invalid service description: {fields}")

    def by_field(self) -> dict[str, str]:
        return {e.field: e.message for e in self.errors}


class AcceptanceError(Exception):
    """Base class for registrations the acceptor refuses."""


class MissingFieldsError(AcceptanceError):
    """The payload lacks one or more required keys."""

    def __init__(self, missing: Sequence[str]):
        self.missing = list(missing)
        required = ", ".join(REQUIRED_FIELDS)
        super().__init__(f"Missing required fields ({required}). Missing: {', '.join(self.missing)}.")


class MalformedPayloadError(AcceptanceError):
    """The request body could not be parsed as JSON."""

    def __init__(self, detail: str = "Invalid JSON payload."):
        super().__init__(detail)


class RegistrationFailed(Exception):
    """The Pod did not accept a submitted payload."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class TokenStoreError(Exception):
    """The local credential file cannot be read or written."""


class CredentialNotSaved(Exception):
    """The Pod accepted the service but its token could not be stored locally."""

    def __init__(self, record: RegisteredService, cause: Exception):
        self.record = record
        super().__init__(f"Service {record.id} was registered but its token was not saved: {cause}")
