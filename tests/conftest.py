import itertools

import pytest

from pod_registration.models.schemas import ServiceDescription
from pod_registration.services.validator import RegistrationValidator

# scenario A input, keyed the way a form submits it
VALID_FORM = {
    "name": "My App",
    "description": "A ten-plus character description.",
    "localEndpoint": "http://localhost:3000",
    "domain": "myapp.panda",
    "serviceType": "website",
    "publicUrl": "https://abc123.ngrok.io",
}


@pytest.fixture
def make_description():
    """Factory: the valid form with some fields overridden."""
    def _make(**overrides) -> ServiceDescription:
        return ServiceDescription(**{**VALID_FORM, **overrides})
    return _make


@pytest.fixture
def wire_payload(make_description):
    """Factory: a validated wire payload dict with some keys overridden."""
    def _make(**overrides) -> dict:
        data = RegistrationValidator().validate(make_description()).to_wire()
        data.update(overrides)
        return data
    return _make


@pytest.fixture
def counter_ids():
    """Deterministic generator: ``id-1``, ``id-2`` ..."""
    c = itertools.count(1)
    return lambda: f"id-{next(c)}"
