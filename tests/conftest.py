"""Root conftest — image factories and sample reports shared by every test area."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from boletas.models.report import ServiceReport


def _make_image(
    path: Path,
    size: tuple[int, int] = (200, 100),
    mode: str = "RGB",
    fmt: str = "JPEG",
    color="red",
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size, color=color).save(path, format=fmt)
    return path


def _sample_report(**overrides) -> ServiceReport:
    defaults = dict(
        client_name="Constructora Andes",
        address="Av. Providencia 1234",
        phone="+56 9 1234 5678",
        client_email="cliente@example.com",
        date="2025-03-14",
        category="Elevadores",
        work_type="Mantenimiento preventivo",
        checklist=["Inspección visual", "Limpieza", "Prueba de funcionamiento"],
        comments="Se cambió el contactor principal.",
        technician="Juan Pérez",
    )
    defaults.update(overrides)
    return ServiceReport(**defaults)


@pytest.fixture()
def make_image():
    return _make_image


@pytest.fixture()
def sample_report():
    return _sample_report
