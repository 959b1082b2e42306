from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from boletas.errors import ValidationError
from boletas.models.client import REQUIRED_FIELDS, Client
from boletas.repositories.base import ClientRepository

logger = logging.getLogger(__name__)


class ClientService:
    def __init__(self, repo: ClientRepository) -> None:
        self.repo = repo

    def list_clients(self) -> list[Client]:
        return self.repo.list_all()

    def register_client(self, data: Mapping[str, Any]) -> bool:
        """Validate and store a client record, ignoring names already on file.

        Returns True when a new record was written. Raises ``ValidationError``
        listing every missing field without touching the store.
        """
        # numbers (e.g. a phone sent as a JSON integer) count as present
        values = {}
        for field in REQUIRED_FIELDS:
            raw = data.get(field)
            values[field] = "" if raw is None else str(raw).strip()
        missing = [field for field, value in values.items() if not value]
        if missing:
            logger.warning("Client registration rejected, missing: %s", ", ".join(missing))
            raise ValidationError(missing, "Todos los campos son obligatorios")

        return self.repo.add_if_absent(Client.model_validate(values))
