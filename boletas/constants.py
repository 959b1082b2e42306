from datetime import datetime
from zoneinfo import ZoneInfo

from boletas.settings import settings

COMPANY_NAME = "JYM ELECTROMECÁNICA"
RECEIPT_TITLE = "Boleta de Servicio"
PLACEHOLDER = "N/A"
EMPTY_CHECKLIST_TEXT = "No se seleccionó ningún ítem del checklist."
EMPTY_COMMENTS_TEXT = "Sin comentarios."
EMPTY_TECHNICIAN_TEXT = "__________"
FOOTER_TEXT = f"© {COMPANY_NAME} - Todos los derechos reservados"


def receipt_filename(receipt_number: str) -> str:
    return f"boleta-{receipt_number}.pdf"


def local_now() -> datetime:
    return datetime.now(ZoneInfo(settings.timezone))


def format_timestamp(value: datetime) -> str:
    return value.strftime("%d/%m/%Y %H:%M:%S")
