"""Web test fixtures — TestClient with every data path redirected to tmp_path."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from boletas.settings import settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point every persisted path at a fresh temporary directory."""
    monkeypatch.setattr(settings, "data_dir", str(tmp_path / "data"))
    for field in ("upload_dir", "optimized_dir", "output_dir", "counter_path", "clients_path", "logo_path"):
        monkeypatch.setattr(settings, field, "")
    return settings


@pytest.fixture()
def mock_mailer(monkeypatch):
    mailer = MagicMock()
    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_mailer", lambda: mailer)
    return mailer


@pytest.fixture()
def client(mock_mailer):
    from starlette.testclient import TestClient

    from web.app import app

    with TestClient(app) as test_client:
        yield test_client


def receipt_form(**overrides) -> dict[str, str | list[str]]:
    data: dict[str, str | list[str]] = {
        "nombreCliente": "Constructora Andes",
        "direccion": "Av. Providencia 1234",
        "telefono": "+56 9 1234 5678",
        "correoCliente": "cliente@example.com",
        "fecha": "2025-03-14",
        "categoria": "Elevadores",
        "tipo": "Mantenimiento preventivo",
        "checklist": ["Inspección visual", "Limpieza"],
        "comentarios": "Sin novedades",
        "encargado": "Juan Pérez",
    }
    data.update(overrides)
    return data
