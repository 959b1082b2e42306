from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Form field names as sent by the service-report page.
FORM_FIELDS = {
    "client_name": "nombreCliente",
    "address": "direccion",
    "phone": "telefono",
    "client_email": "correoCliente",
    "date": "fecha",
    "category": "categoria",
    "work_type": "tipo",
    "comments": "comentarios",
    "technician": "encargado",
}


class ServiceReport(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    client_name: str = ""
    address: str = ""
    phone: str = ""
    client_email: str = ""
    date: str = ""
    category: str = ""
    work_type: str = ""
    checklist: list[str] = Field(default_factory=list)
    comments: str = ""
    technician: str = ""

    @field_validator("checklist")
    @classmethod
    def _drop_blank_items(cls, items: list[str]) -> list[str]:
        return [item.strip() for item in items if item and item.strip()]

    @classmethod
    def from_form(cls, form: Any) -> ServiceReport:
        """Build a report from a multi-dict form (Starlette ``FormData`` or similar).

        Repeated ``checklist`` (or ``checklist[]``) values keep submission order;
        a single value is a one-item checklist.
        """
        values: dict[str, Any] = {}
        for attr, field_name in FORM_FIELDS.items():
            raw = form.get(field_name)
            values[attr] = raw if isinstance(raw, str) else ""

        checklist: list[str] = []
        for key in ("checklist", "checklist[]"):
            checklist.extend(v for v in form.getlist(key) if isinstance(v, str))
        values["checklist"] = checklist
        return cls(**values)
