"""Caller-side registration flow: validate, submit, keep the credential."""
from __future__ import annotations

from typing import Optional

from pod_registration.core.errors import CredentialNotSaved, TokenStoreError
from pod_registration.core.logging import get_logger
from pod_registration.models.schemas import RegisteredService, ServiceDescription
from pod_registration.services.pod_client import PodClient
from pod_registration.services.token_store import TokenFileStore
from pod_registration.services.validator import RegistrationValidator

log = get_logger("Registrar")


class Registrar:
    """Runs one registration end to end.

    Field errors are raised (``DescriptionInvalid``) before anything touches
    the network; Pod failures surface as ``RegistrationFailed``. When the Pod
    accepted the service but the token file could not be written,
    ``CredentialNotSaved`` carries the record so it is not lost.
    """

    def __init__(
        self,
        client: PodClient,
        validator: Optional[RegistrationValidator] = None,
        token_store: Optional[TokenFileStore] = None,
    ):
        self._client = client
        self._validator = validator or RegistrationValidator()
        self._token_store = token_store

    async def register(self, description: ServiceDescription) -> RegisteredService:
        payload = self._validator.validate(description)
        log.info("submitting %s to %s", payload.name, self._client.register_url)
        record = await self._client.register(payload)
        if record.token != payload.token:
            log.warning("Pod echoed a different token for %s", record.id)
        if self._token_store is not None:
            try:
                self._token_store.save(record)
            except TokenStoreError as e:
                log.error("token for %s not saved: %s", record.id, e)
                raise CredentialNotSaved(record, e) from e
        return record
