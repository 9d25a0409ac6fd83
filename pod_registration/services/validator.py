"""Registration validator.

Checks a raw ``ServiceDescription`` against the field rules, collects every
failing field in one pass, and turns a clean description into the wire
``RegistrationPayload`` with a freshly generated token.

Each rule is a predicate over the whole description returning zero or more
``FieldError`` entries, so cross-field rules (the custom type that only
matters when the type is ``other``) sit next to single-field ones.
"""
from __future__ import annotations

import re
from typing import Callable, Optional, Sequence

from pydantic import AnyUrl, TypeAdapter, ValidationError

from pod_registration.core.errors import DescriptionInvalid
from pod_registration.core.logging import get_logger
from pod_registration.models.schemas import FieldError, RegistrationPayload, ServiceDescription, ServiceType
from pod_registration.services.ids import IdGenerator, new_uuid

log = get_logger("Validator")

NAME_MIN = 3
DESCRIPTION_MIN = 10
DESCRIPTION_MAX = 200
CUSTOM_TYPE_MIN = 2
DOMAIN_SUFFIXES = ("panda", "pinou", "pika", "ninar", "nation")
DOMAIN_RE = re.compile(r"^[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)*\.(" + "|".join(DOMAIN_SUFFIXES) + r")$")

Rule = Callable[[ServiceDescription], list[FieldError]]

_URL = TypeAdapter(AnyUrl)


def _text(value: Optional[str]) -> str:
    return (value or "").strip()


def is_absolute_url(value: str) -> bool:
    """True when ``value`` parses as a URL with a scheme and a host."""
    try:
        url = _URL.validate_python(value)
    except ValidationError:
        return False
    return bool(url.host)


def check_name(d: ServiceDescription) -> list[FieldError]:
    if len(_text(d.name)) < NAME_MIN:
        return [FieldError(field="name", message=f"Service name must be at least {NAME_MIN} characters long.")]
    return []


def check_description(d: ServiceDescription) -> list[FieldError]:
    size = len(_text(d.description))
    if size < DESCRIPTION_MIN:
        return [FieldError(field="description",
                           message=f"Description must be at least {DESCRIPTION_MIN} characters long.")]
    if size > DESCRIPTION_MAX:
        return [FieldError(field="description",
                           message=f"Description must be at most {DESCRIPTION_MAX} characters.")]
    return []


def check_local_endpoint(d: ServiceDescription) -> list[FieldError]:
    if not is_absolute_url(_text(d.local_endpoint)):
        return [FieldError(field="localEndpoint",
                           message="Please enter a valid local URL (e.g., http://localhost:3000).")]
    return []


def check_domain(d: ServiceDescription) -> list[FieldError]:
    domain = _text(d.domain)
    if domain and not DOMAIN_RE.match(domain):
        suffixes = ", ".join(f".{s}" for s in DOMAIN_SUFFIXES)
        return [FieldError(field="domain",
                           message=f"Invalid domain format (e.g., myapp.panda); allowed suffixes: {suffixes}.")]
    return []


def check_service_type(d: ServiceDescription) -> list[FieldError]:
    if _text(d.service_type) not in {t.value for t in ServiceType}:
        return [FieldError(field="serviceType", message="Please select a service type.")]
    return []


def check_custom_type(d: ServiceDescription) -> list[FieldError]:
    # only binding when the type is "other"; ignored for the fixed types
    if _text(d.service_type) != ServiceType.OTHER.value:
        return []
    custom = _text(d.custom_type)
    if len(custom) < CUSTOM_TYPE_MIN:
        return [FieldError(field="customType",
                           message=f"Custom type must be at least {CUSTOM_TYPE_MIN} characters long.")]
    # the resolved type replaces "other", so it cannot be "other" itself
    if custom.lower() == ServiceType.OTHER.value:
        return [FieldError(field="customType",
                           message="Custom type must name the service type, not \"other\".")]
    return []


def check_public_url(d: ServiceDescription) -> list[FieldError]:
    if not is_absolute_url(_text(d.public_url)):
        return [FieldError(field="publicUrl",
                           message="Please enter a valid public URL (e.g., from ngrok).")]
    return []


DEFAULT_RULES: tuple[Rule, ...] = (
    check_name,
    check_description,
    check_local_endpoint,
    check_domain,
    check_service_type,
    check_custom_type,
    check_public_url,
)


def resolve_type(d: ServiceDescription) -> str:
    """The payload ``type``: the enum value, or the custom type for ``other``."""
    service_type = _text(d.service_type)
    if service_type == ServiceType.OTHER.value:
        return _text(d.custom_type)
    return service_type


class RegistrationValidator:
    """Validates descriptions and builds wire payloads.

    Stateless apart from the injected token generator, so one instance can be
    shared across concurrent callers.
    """

    def __init__(self, token_factory: IdGenerator = new_uuid, rules: Sequence[Rule] = DEFAULT_RULES):
        self._token_factory = token_factory
        self._rules = tuple(rules)

    def check(self, description: ServiceDescription) -> list[FieldError]:
        """Run every rule and return all field errors (empty when valid)."""
        errors: list[FieldError] = []
        for rule in self._rules:
            errors.extend(rule(description))
        return errors

    def validate(self, description: ServiceDescription) -> RegistrationPayload:
        """Return the payload for a valid description.

        Raises ``DescriptionInvalid`` carrying every failing field otherwise.
        A new token is drawn on each successful call.
        """
        errors = self.check(description)
        if errors:
            log.info("description rejected: %s", ", ".join(e.field for e in errors))
            raise DescriptionInvalid(errors)

        domain = _text(description.domain)
        return RegistrationPayload(
            name=_text(description.name),
            description=_text(description.description),
            local_url=_text(description.local_endpoint),
            domain=domain or None,
            type=resolve_type(description),
            public_url=_text(description.public_url),
            token=self._token_factory(),
        )
