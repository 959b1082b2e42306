from abc import ABC, abstractmethod

from boletas.models.client import Client


class ReceiptCounter(ABC):
    @abstractmethod
    def next(self) -> str:
        """Consume and return the next receipt number, zero-padded to 6 digits."""
        ...

    @abstractmethod
    def peek(self) -> int: ...


class ClientRepository(ABC):
    @abstractmethod
    def list_all(self) -> list[Client]: ...

    @abstractmethod
    def add_if_absent(self, client: Client) -> bool:
        """Append the client unless one with the same name exists. Returns True if inserted."""
        ...
