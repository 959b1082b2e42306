"""JSON-file backed counter and client registry.

Each file is rewritten through a temporary sibling and ``os.replace`` so a
reader never sees a half-written document. Read-modify-write cycles are
serialized per path with an in-process lock.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from boletas.errors import CounterError
from boletas.locks import lock_for
from boletas.models.client import Client
from boletas.repositories.base import ClientRepository, ReceiptCounter

logger = logging.getLogger(__name__)

COUNTER_KEY = "contador"


def _write_json_atomic(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class JSONFileCounter(ReceiptCounter):
    def __init__(self, path: str | Path, reset_on_corruption: bool = True) -> None:
        self.path = Path(path)
        self.reset_on_corruption = reset_on_corruption
        self._lock = lock_for(self.path)

    def _read(self) -> int:
        if not self.path.exists():
            return 1
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            value = data.get(COUNTER_KEY) if isinstance(data, dict) else None
            if value is None:
                return 1
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{COUNTER_KEY} is not an integer: {value!r}")
        except (OSError, ValueError) as exc:
            if not self.reset_on_corruption:
                raise CounterError(f"Receipt counter at {self.path} is unreadable: {exc}") from exc
            logger.warning("Receipt counter at %s is corrupt (%s), restarting numbering at 1", self.path, exc)
            return 1
        return value if value > 0 else 1

    def peek(self) -> int:
        with self._lock:
            return self._read()

    def next(self) -> str:
        with self._lock:
            value = self._read()
            try:
                _write_json_atomic(self.path, {COUNTER_KEY: value + 1})
            except OSError as exc:
                raise CounterError(f"Could not persist receipt counter at {self.path}: {exc}") from exc
        number = f"{value:06d}"
        logger.debug("Issued receipt number %s", number)
        return number


class JSONFileClientRepository(ClientRepository):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = lock_for(self.path)

    def _load(self) -> list[Client]:
        if not self.path.exists():
            _write_json_atomic(self.path, [])
            logger.info("Created empty client registry at %s", self.path)
            return []
        records = json.loads(self.path.read_text(encoding="utf-8"))
        return [Client.model_validate(record) for record in records]

    def list_all(self) -> list[Client]:
        with self._lock:
            return self._load()

    def add_if_absent(self, client: Client) -> bool:
        with self._lock:
            clients = self._load()
            if any(existing.key == client.key for existing in clients):
                logger.debug("Client %r already registered, skipping insert", client.name)
                return False
            clients.append(client)
            _write_json_atomic(self.path, [c.to_record() for c in clients])
        logger.info("Registered client %r (%d total)", client.name, len(clients))
        return True
