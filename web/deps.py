from __future__ import annotations

import logging

from boletas.notifications.factory import get_mailer
from boletas.pdf.receipt import ReceiptPDF
from boletas.photos.optimizer import PhotoOptimizer
from boletas.repositories.factory import get_client_repository, get_receipt_counter
from boletas.services.client_service import ClientService
from boletas.services.receipt_service import ReceiptService
from boletas.settings import settings
from boletas.storage.factory import get_storage

logger = logging.getLogger(__name__)


def get_receipt_service() -> ReceiptService:
    optimizer = PhotoOptimizer(
        settings.get_optimized_dir(),
        max_size=(settings.photo_max_width, settings.photo_max_height),
        quality=settings.photo_quality,
    )
    return ReceiptService(
        counter=get_receipt_counter(),
        storage=get_storage(),
        optimizer=optimizer,
        mailer=get_mailer(),
        pdf_generator=ReceiptPDF(logo_path=settings.get_logo_path()),
    )


def get_client_service() -> ClientService:
    return ClientService(get_client_repository())
