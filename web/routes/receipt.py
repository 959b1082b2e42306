from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from boletas.errors import BoletaError, ValidationError
from boletas.models.report import ServiceReport
from boletas.photos.intake import remove_files, save_upload
from boletas.settings import settings
from web.deps import get_receipt_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/boleta")

PHOTOS_FIELD = "fotos"
FAILURE_MESSAGE = "Error al enviar la boleta"


def _failure(status_code: int, error: str) -> JSONResponse:
    return JSONResponse({"mensaje": FAILURE_MESSAGE, "error": error}, status_code=status_code)


@router.post("")
@router.post("/", include_in_schema=False)
async def create_receipt(request: Request):
    form = await request.form()
    report = ServiceReport.from_form(form)
    uploads = [u for u in form.getlist(PHOTOS_FIELD) if isinstance(u, UploadFile) and u.filename]
    logger.info(
        "POST /api/boleta — client=%r checklist=%d photos=%d",
        report.client_name,
        len(report.checklist),
        len(uploads),
    )

    if len(uploads) > settings.max_photos:
        logger.warning("Receipt rejected: %d photos exceeds limit of %d", len(uploads), settings.max_photos)
        return _failure(400, f"Se permiten como máximo {settings.max_photos} fotos")

    originals: list[Path] = []
    try:
        for upload in uploads:
            data = await upload.read()
            if data:
                originals.append(save_upload(settings.get_upload_dir(), upload.filename or "", data))
    except OSError as exc:
        remove_files(originals)
        logger.exception("Failed to store uploaded photos")
        return _failure(500, str(exc))

    service = get_receipt_service()
    try:
        issued = await run_in_threadpool(service.issue, report, originals)
    except ValidationError as exc:
        return _failure(400, str(exc))
    except BoletaError as exc:
        logger.error("Receipt pipeline failed: %s", exc)
        return _failure(500, str(exc))

    logger.info("Receipt %s issued (emailed=%s)", issued.number, issued.emailed)
    return {"mensaje": "Boleta enviada correctamente", "numeroBoleta": issued.number}
