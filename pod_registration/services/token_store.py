"""Local credential file for registered services.

After a successful registration the caller keeps ``{token, id}`` so the
service can authenticate against the Pod later. Entries are keyed by record
id in a single JSON document.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from threading import RLock
from typing import Dict, Optional, Union

from pod_registration.core.errors import TokenStoreError
from pod_registration.core.logging import get_logger
from pod_registration.models.schemas import RegisteredService

log = get_logger("TokenStore")


class TokenFileStore:
    """JSON file of credentials. Thread-safe and simple."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._lock = RLock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Dict[str, dict]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            raise TokenStoreError(f"Cannot read token file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise TokenStoreError(f"Token file {self._path} does not hold a JSON object")
        return data

    def save(self, record: RegisteredService) -> None:
        """Store the credential for ``record``, replacing any entry with the same id.

        Raises ``TokenStoreError`` when the file is unreadable, not a JSON
        object, or cannot be written; the file is left untouched then.
        """
        with self._lock:
            entries = self._read()
            entries[record.id] = {
                "token": record.token,
                "name": record.name,
                "createdAt": record.to_wire()["createdAt"],
            }
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with tmp.open("w", encoding="utf-8") as fh:
                    json.dump(entries, fh, indent=2)
                os.replace(tmp, self._path)
            except OSError as e:
                raise TokenStoreError(f"Cannot write token file {self._path}: {e}") from e
            log.info("saved token for %s to %s", record.id, self._path)

    def token_for(self, record_id: str) -> Optional[str]:
        with self._lock:
            entry = self._read().get(record_id)
            return entry["token"] if entry else None

    def entries(self) -> Dict[str, dict]:
        with self._lock:
            return self._read()
