from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from pod_registration.core.errors import MissingFieldsError
from pod_registration.models.schemas import RegisteredService
from pod_registration.services.acceptor import RegistrationAcceptor, missing_fields
from pod_registration.services.validator import RegistrationValidator

FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def test_accept_stamps_id_and_time(make_description):
    before = datetime.now(timezone.utc)
    payload = RegistrationValidator().validate(make_description())
    record = RegistrationAcceptor().accept(payload)

    assert record.id and record.id != record.token
    assert record.token == payload.token
    assert record.created_at >= before
    assert record.model_dump(exclude={"id", "created_at"}) == payload.model_dump()


def test_accept_with_injected_capabilities(counter_ids, wire_payload):
    sink = []

    class ListSink:
        def save(self, record: RegisteredService) -> None:
            sink.append(record)

    acceptor = RegistrationAcceptor(id_factory=counter_ids, clock=lambda: FIXED_NOW, sink=ListSink())
    record = acceptor.accept(wire_payload(token="tok-abc"))

    assert record.id == "id-1"
    assert sink == [record]
    wire = record.to_wire()
    assert wire["createdAt"] == "2026-10-19T12:00:00Z"
    assert "created_at" not in wire
    assert wire["token"] == "tok-abc"


@pytest.mark.parametrize("key", ["name", "local_url", "type", "public_url", "token"])
def test_missing_required_key(key, wire_payload):
    payload = wire_payload()
    del payload[key]
    with pytest.raises(MissingFieldsError) as exc:
        RegistrationAcceptor().accept(payload)
    assert exc.value.missing == [key]
    assert key in str(exc.value)


@pytest.mark.parametrize("value", ["", "   ", None, 123])
def test_blank_or_non_string_counts_as_missing(value, wire_payload):
    with pytest.raises(MissingFieldsError) as exc:
        RegistrationAcceptor().accept(wire_payload(name=value))
    assert exc.value.missing == ["name"]


@pytest.mark.parametrize("body", [[], "text", None, 42])
def test_non_object_payload_is_missing_everything(body):
    assert missing_fields(body) == ["name", "local_url", "type", "public_url", "token"]


def test_optional_fields_dropped_when_blank(wire_payload):
    record = RegistrationAcceptor().accept(wire_payload(domain="", description=None))
    wire = record.to_wire()
    assert "domain" not in wire
    assert "description" not in wire


def test_unknown_keys_are_not_echoed(wire_payload):
    record = RegistrationAcceptor().accept(wire_payload(id="client-chosen", createdAt="yesterday", extra=1))
    assert record.id != "client-chosen"
    assert "extra" not in record.to_wire()


def test_record_is_immutable(wire_payload):
    record = RegistrationAcceptor().accept(wire_payload())
    with pytest.raises(ValidationError):
        record.name = "renamed"


def test_ids_unique_sequential(wire_payload):
    acceptor = RegistrationAcceptor()
    payload = wire_payload()
    ids = {acceptor.accept(payload).id for _ in range(1000)}
    assert len(ids) == 1000


def test_ids_unique_concurrent(wire_payload):
    acceptor = RegistrationAcceptor()
    payload = wire_payload()
    with ThreadPoolExecutor(max_workers=16) as pool:
        records = list(pool.map(lambda _: acceptor.accept(payload), range(1000)))
    assert len({r.id for r in records}) == 1000
