"""Registration acceptor.

Server side of the registration exchange: re-checks the required keys of an
untrusted payload, stamps a fresh ``id`` and ``createdAt`` and returns the
canonical record. Nothing is kept between calls; persistence, when wanted, is
a ``RecordSink`` the finished record is handed to.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Union, cast

from pod_registration.core.errors import REQUIRED_FIELDS, MissingFieldsError
from pod_registration.core.logging import get_logger
from pod_registration.models.schemas import RegisteredService, RegistrationPayload
from pod_registration.services.ids import Clock, IdGenerator, new_uuid, utc_now

log = get_logger("Acceptor")

OPTIONAL_FIELDS: tuple[str, ...] = ("description", "domain")


class RecordSink(Protocol):
    """External store the acceptor hands finished records to."""

    def save(self, record: RegisteredService) -> None:
        ...


def _present(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def missing_fields(data: object) -> list[str]:
    """Required keys that are absent, blank or not strings."""
    if not isinstance(data, Mapping):
        return list(REQUIRED_FIELDS)
    return [k for k in REQUIRED_FIELDS if not _present(data.get(k))]


class RegistrationAcceptor:
    """Turns payloads into ``RegisteredService`` records.

    ``id_factory`` must be independent of the payload token; the default draws
    a random UUID per call, which is safe under concurrent use.
    """

    def __init__(
        self,
        id_factory: IdGenerator = new_uuid,
        clock: Clock = utc_now,
        sink: Optional[RecordSink] = None,
    ):
        self._id_factory = id_factory
        self._clock = clock
        self._sink = sink

    def accept(self, payload: Union[RegistrationPayload, Mapping[str, Any], object]) -> RegisteredService:
        """Validate required keys and return the stamped record.

        Raises ``MissingFieldsError`` when a required key is absent or blank.
        """
        data = payload.model_dump() if isinstance(payload, RegistrationPayload) else payload
        missing = missing_fields(data)
        if missing:
            log.info("registration rejected, missing: %s", ", ".join(missing))
            raise MissingFieldsError(missing)
        data = cast(Mapping[str, Any], data)

        fields = {k: data[k] for k in REQUIRED_FIELDS}
        for k in OPTIONAL_FIELDS:
            value = data.get(k)
            # JS-style clients send "" or null for an unset optional field
            if isinstance(value, str) and value.strip():
                fields[k] = value

        record = RegisteredService(id=self._id_factory(), created_at=self._clock(), **fields)
        log.info("registered %s (%s) id=%s public_url=%s", record.name, record.type, record.id, record.public_url)

        if self._sink is not None:
            self._sink.save(record)
        return record
