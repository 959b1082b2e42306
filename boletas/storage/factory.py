import logging

from boletas.settings import settings
from boletas.storage.base import ReceiptStorage

logger = logging.getLogger(__name__)


def get_storage() -> ReceiptStorage:
    from boletas.storage.local import LocalStorage

    output_dir = settings.get_output_dir()
    logger.debug("Using receipt storage: %s (keep=%d)", output_dir, settings.receipt_retention)
    return LocalStorage(output_dir, keep=settings.receipt_retention)
