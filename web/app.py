from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from boletas.logging import configure_logging
from boletas.settings import settings
from web.routes.clients import router as clients_router
from web.routes.receipt import router as receipt_router

configure_logging()
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).parent


def prepare_directories() -> None:
    for directory in (
        settings.get_upload_dir(),
        settings.get_optimized_dir(),
        settings.get_output_dir(),
        settings.get_counter_path().parent,
        settings.get_clients_path().parent,
    ):
        directory.mkdir(parents=True, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    prepare_directories()
    settings.smtp_configured()
    logger.info("Application started, receipts stored in %s", settings.get_output_dir().resolve())
    yield


app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)

app.include_router(receipt_router)
app.include_router(clients_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return JSONResponse({"mensaje": "Error interno del servidor"}, status_code=500)


# Mounted last so the API routes above take precedence.
app.mount("/", StaticFiles(directory=BASE_DIR / "static", html=True), name="static")
