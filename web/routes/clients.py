from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from boletas.errors import ValidationError
from web.deps import get_client_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/clientes")


async def _read_body(request: Request) -> dict[str, Any]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        payload = await request.json()
        return payload if isinstance(payload, dict) else {}
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


@router.get("")
@router.get("/", include_in_schema=False)
async def list_clients(request: Request):
    clients = get_client_service().list_clients()
    logger.info("GET /api/clientes — %d clients", len(clients))
    return [client.to_record() for client in clients]


@router.post("")
@router.post("/", include_in_schema=False)
async def register_client(request: Request):
    try:
        data = await _read_body(request)
    except ValueError:
        logger.warning("POST /api/clientes — malformed JSON body")
        return JSONResponse({"mensaje": "Cuerpo de la solicitud inválido"}, status_code=400)

    try:
        created = get_client_service().register_client(data)
    except ValidationError as exc:
        return JSONResponse({"mensaje": str(exc), "faltantes": exc.missing}, status_code=400)

    logger.info("POST /api/clientes — name=%r created=%s", data.get("nombre"), created)
    return {"mensaje": "Cliente registrado correctamente"}
