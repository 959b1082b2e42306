from abc import ABC, abstractmethod
from pathlib import Path


class ReceiptStorage(ABC):
    @abstractmethod
    def save(self, receipt_number: str, data: bytes) -> Path:
        """Store a rendered receipt, apply retention, and return its path."""
        ...

    @abstractmethod
    def get(self, receipt_number: str) -> bytes:
        """Retrieve a stored receipt by number."""
        ...

    @abstractmethod
    def list_documents(self) -> list[Path]:
        """Return stored receipts, most recently modified first."""
        ...
