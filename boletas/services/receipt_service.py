from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel

from boletas.models.report import ServiceReport
from boletas.notifications.mailer import ReceiptMailer
from boletas.pdf.receipt import ReceiptPDF
from boletas.photos.intake import remove_files
from boletas.photos.optimizer import PhotoOptimizer
from boletas.repositories.base import ReceiptCounter
from boletas.storage.base import ReceiptStorage

logger = logging.getLogger(__name__)


class IssuedReceipt(BaseModel):
    number: str
    path: Path
    emailed: bool = False


class ReceiptService:
    def __init__(
        self,
        counter: ReceiptCounter,
        storage: ReceiptStorage,
        optimizer: PhotoOptimizer,
        mailer: ReceiptMailer,
        pdf_generator: ReceiptPDF | None = None,
    ) -> None:
        self.counter = counter
        self.storage = storage
        self.optimizer = optimizer
        self.mailer = mailer
        self.pdf_generator = pdf_generator or ReceiptPDF()

    def issue(self, report: ServiceReport, photo_paths: Sequence[str | Path] = ()) -> IssuedReceipt:
        """Optimize photos, number, render, store and email one receipt.

        The counter is only consumed once every photo has been optimized, and
        the email only goes out after the document is stored. Original and
        optimized photos are removed whether or not the pipeline succeeds.
        """
        optimized: list[Path] = []
        try:
            optimized = self.optimizer.optimize(photo_paths)
            number = self.counter.next()
            logger.info("Issuing receipt %s for client=%r photos=%d", number, report.client_name, len(optimized))

            pdf_bytes = self.pdf_generator.generate(report, number, optimized)
            path = self.storage.save(number, pdf_bytes)
            logger.info("Receipt %s stored at %s", number, path)

            emailed = False
            if report.client_email:
                self.mailer.send(report.client_email, path, number)
                emailed = True
            else:
                logger.info("Receipt %s has no client email, skipping notification", number)

            return IssuedReceipt(number=number, path=path, emailed=emailed)
        finally:
            removed = remove_files([*photo_paths, *optimized])
            logger.debug("Removed %d transient photo files", removed)
