import logging
from pathlib import Path

from boletas.constants import receipt_filename
from boletas.errors import RenderError
from boletas.locks import lock_for
from boletas.storage.base import ReceiptStorage

logger = logging.getLogger(__name__)


class LocalStorage(ReceiptStorage):
    """Receipts on local disk, keeping only the ``keep`` most recent documents."""

    def __init__(self, base_dir: str | Path, keep: int = 5) -> None:
        if keep < 1:
            raise ValueError("Retention must keep at least one document")
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.keep = keep
        self._lock = lock_for(self.base_dir)

    def path_for(self, receipt_number: str) -> Path:
        return self.base_dir / receipt_filename(receipt_number)

    def save(self, receipt_number: str, data: bytes) -> Path:
        path = self.path_for(receipt_number)
        with self._lock:
            try:
                path.write_bytes(data)
            except OSError as exc:
                raise RenderError(f"Could not write receipt {path.name}: {exc}") from exc
            logger.debug("Saved %s (%d bytes) to %s", path.name, len(data), path.resolve())
            self._prune(keep_path=path)
        return path.resolve()

    def get(self, receipt_number: str) -> bytes:
        path = self.path_for(receipt_number).resolve()
        logger.debug("Reading receipt %s from %s", receipt_number, path)
        return path.read_bytes()

    def list_documents(self) -> list[Path]:
        files = [p for p in self.base_dir.glob("*.pdf") if p.is_file()]
        return sorted(files, key=lambda p: p.stat().st_mtime_ns, reverse=True)

    def _prune(self, keep_path: Path) -> None:
        others = [p for p in self.list_documents() if p.name != keep_path.name]
        for stale in others[self.keep - 1 :]:
            try:
                stale.unlink()
                logger.info("Pruned old receipt %s", stale.name)
            except FileNotFoundError:
                pass
