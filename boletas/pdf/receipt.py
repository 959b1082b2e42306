from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from pathlib import Path

from fpdf import FPDF
from fpdf.enums import MethodReturnValue
from fpdf.errors import FPDFException
from PIL import Image, ImageDraw, UnidentifiedImageError

from boletas.constants import (
    EMPTY_CHECKLIST_TEXT,
    EMPTY_COMMENTS_TEXT,
    EMPTY_TECHNICIAN_TEXT,
    FOOTER_TEXT,
    PLACEHOLDER,
    RECEIPT_TITLE,
)
from boletas.errors import RenderError
from boletas.models.report import ServiceReport

logger = logging.getLogger(__name__)

FONT = "Helvetica"

MARGIN = 50
TEXT_X = 60
PANEL_RADIUS = 5
PANEL_GAP = 20

LOGO_X = 50
LOGO_Y = 40
LOGO_WIDTH = 100
LOGO_RADIUS = 15
TITLE_Y = 150

CLIENT_PANEL_HEIGHT = 160
CHECKLIST_PER_ROW = 2
CHECKLIST_ROW_HEIGHT = 15
CHECKLIST_ROW_GAP = 4
COMMENTS_PANEL_HEIGHT = 60
COMMENTS_LINE_HEIGHT = 14
COMMENTS_MAX_LINES = 2
SIGNER_PANEL_HEIGHT = 40
FOOTER_OFFSET = 40

PHOTOS_PER_PAGE = 6
PHOTOS_PER_ROW = 2
PHOTO_WIDTH = 250
PHOTO_HEIGHT = 180
PHOTO_GAP_X = 15
PHOTO_GAP_Y = 15

COLORS = {
    "title": "#0D47A1",
    "subtitle": "#424242",
    "divider": "#90CAF9",
    "panel_fill": "#E3F2FD",
    "panel_border": "#CCCCCC",
    "heading": "#1A237E",
    "text": "#000000",
    "footer": "#808080",
}


def _hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    h = hex_color.lstrip("#")
    return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))


def _latin1(text: str) -> str:
    """Core PDF fonts only cover Latin-1; anything else becomes '?'."""
    return text.encode("latin-1", "replace").decode("latin-1")


ELLIPSIS = "..."


def _truncate(pdf: FPDF, text: str, width: float) -> str:
    # cells pad their text by c_margin on both sides
    available = width - 2 * pdf.c_margin
    while text and pdf.get_string_width(text + ELLIPSIS) > available:
        text = text[:-1]
    return text.rstrip() + ELLIPSIS


def fit_text(pdf: FPDF, text: str, width: float) -> str:
    """Shorten ``text`` with a trailing ellipsis so it fits in a cell ``width`` points wide."""
    if pdf.get_string_width(text) <= width - 2 * pdf.c_margin:
        return text
    return _truncate(pdf, text, width)


def comment_lines(pdf: FPDF, text: str, width: float) -> list[str]:
    """Wrap ``text`` to ``width`` and keep what fits in the comments panel."""
    lines = pdf.multi_cell(width, COMMENTS_LINE_HEIGHT, text, dry_run=True, output=MethodReturnValue.LINES)
    if len(lines) <= COMMENTS_MAX_LINES:
        return lines
    kept = lines[:COMMENTS_MAX_LINES]
    kept[-1] = _truncate(pdf, kept[-1], width)
    return kept


def checklist_panel_height(item_count: int) -> float:
    rows = math.ceil(max(item_count, 1) / CHECKLIST_PER_ROW)
    return 40 + rows * (CHECKLIST_ROW_HEIGHT + CHECKLIST_ROW_GAP)


def photo_cell_origin(index: int) -> tuple[float, float]:
    """Top-left corner of the gallery cell for the ``index``-th photo."""
    in_page = index % PHOTOS_PER_PAGE
    row, column = divmod(in_page, PHOTOS_PER_ROW)
    x = MARGIN + column * (PHOTO_WIDTH + PHOTO_GAP_X)
    y = MARGIN + row * (PHOTO_HEIGHT + PHOTO_GAP_Y)
    return x, y


def rounded_logo(path: Path) -> Image.Image | None:
    """Load the logo with its corners cut to the same radius used on the page."""
    if not path.is_file():
        logger.debug("Logo not found at %s, rendering without it", path)
        return None
    try:
        with Image.open(path) as src:
            img = src.convert("RGBA")
    except (UnidentifiedImageError, OSError):
        logger.warning("Logo at %s is unreadable, rendering without it", path, exc_info=True)
        return None

    # Radius is in page points; scale it to image pixels.
    radius = round(LOGO_RADIUS * img.width / LOGO_WIDTH)
    mask = Image.new("L", img.size, 0)
    ImageDraw.Draw(mask).rounded_rectangle((0, 0, img.width - 1, img.height - 1), radius=radius, fill=255)
    img.putalpha(mask)
    return img


class ReceiptPDF:
    def __init__(self, logo_path: Path | None = None) -> None:
        self.logo_path = logo_path

    def generate(
        self,
        report: ServiceReport,
        receipt_number: str,
        photo_paths: Sequence[str | Path] = (),
    ) -> bytes:
        try:
            pdf = FPDF(orientation="P", unit="pt", format="A4")
            pdf.set_margins(MARGIN, MARGIN, MARGIN)
            pdf.set_auto_page_break(auto=False)
            pdf.add_page()

            self._draw_footer(pdf)
            self._draw_logo(pdf)
            y = self._draw_title(pdf, receipt_number)
            y = self._draw_client_panel(pdf, y, report)
            y = self._draw_checklist_panel(pdf, y, report.checklist)
            y = self._draw_comments_panel(pdf, y, report.comments)
            self._draw_signer_panel(pdf, y, report.technician)

            placed = self._draw_gallery(pdf, photo_paths)
            output = bytes(pdf.output())
        except (FPDFException, OSError, ValueError) as exc:
            raise RenderError(f"Could not render receipt {receipt_number}: {exc}") from exc

        logger.debug(
            "PDF generated: receipt=%s checklist=%d photos=%d pages=%d size=%d bytes",
            receipt_number,
            len(report.checklist),
            placed,
            pdf.page_no(),
            len(output),
        )
        return output

    def _panel_width(self, pdf: FPDF) -> float:
        return pdf.w - 2 * MARGIN

    def _text_width(self, pdf: FPDF) -> float:
        return pdf.w - 2 * TEXT_X

    def _set_text(self, pdf: FPDF, size: float, color: str, style: str = "") -> None:
        pdf.set_font(FONT, style, size)
        pdf.set_text_color(*_hex_to_rgb(color))

    def _ensure_space(self, pdf: FPDF, y: float, height: float) -> float:
        """Start a new page when a panel of ``height`` would run into the footer."""
        if y + height <= pdf.h - FOOTER_OFFSET - PANEL_GAP:
            return y
        pdf.add_page()
        return MARGIN

    def _draw_panel(self, pdf: FPDF, y: float, height: float) -> None:
        pdf.set_fill_color(*_hex_to_rgb(COLORS["panel_fill"]))
        pdf.set_draw_color(*_hex_to_rgb(COLORS["panel_border"]))
        pdf.set_line_width(1)
        pdf.rect(
            MARGIN,
            y,
            self._panel_width(pdf),
            height,
            style="DF",
            round_corners=True,
            corner_radius=PANEL_RADIUS,
        )

    def _draw_logo(self, pdf: FPDF) -> None:
        if self.logo_path is None:
            return
        logo = rounded_logo(self.logo_path)
        if logo is None:
            return
        height = LOGO_WIDTH * logo.height / logo.width
        pdf.image(logo, x=LOGO_X, y=LOGO_Y, w=LOGO_WIDTH, h=height)

    def _draw_title(self, pdf: FPDF, receipt_number: str) -> float:
        pdf.set_xy(MARGIN, TITLE_Y)
        self._set_text(pdf, 26, COLORS["title"], "B")
        pdf.cell(0, 32, RECEIPT_TITLE, align="C", new_x="LMARGIN", new_y="NEXT")

        pdf.set_y(pdf.get_y() + 4)
        self._set_text(pdf, 20, COLORS["subtitle"])
        pdf.cell(0, 24, _latin1(f"N° {receipt_number}"), align="C", new_x="LMARGIN", new_y="NEXT")

        divider_y = pdf.get_y() + 8
        pdf.set_draw_color(*_hex_to_rgb(COLORS["divider"]))
        pdf.set_line_width(2)
        pdf.line(100, divider_y, pdf.w - 100, divider_y)
        return divider_y + 16

    def _draw_client_panel(self, pdf: FPDF, y: float, report: ServiceReport) -> float:
        self._draw_panel(pdf, y, CLIENT_PANEL_HEIGHT)

        pdf.set_xy(TEXT_X, y + 10)
        self._set_text(pdf, 14, COLORS["heading"], "B")
        pdf.cell(self._text_width(pdf), 18, "Datos del Cliente", new_x="LEFT", new_y="NEXT")
        pdf.set_y(pdf.get_y() + 6)

        fields = [
            ("Cliente", report.client_name),
            ("Dirección", report.address),
            ("Teléfono", report.phone),
            ("Correo", report.client_email),
            ("Fecha", report.date),
            ("Categoría", report.category),
            ("Tipo", report.work_type),
        ]
        self._set_text(pdf, 12, COLORS["text"])
        for label, value in fields:
            pdf.set_x(TEXT_X)
            text = _latin1(f"{label}: {value or PLACEHOLDER}")
            pdf.cell(self._text_width(pdf), 15, text, new_x="LEFT", new_y="NEXT")

        return y + CLIENT_PANEL_HEIGHT + PANEL_GAP

    def _draw_checklist_panel(self, pdf: FPDF, y: float, items: list[str]) -> float:
        height = checklist_panel_height(len(items))
        y = self._ensure_space(pdf, y, height)
        self._draw_panel(pdf, y, height)

        pdf.set_xy(TEXT_X, y + 10)
        self._set_text(pdf, 13, COLORS["heading"], "B")
        pdf.cell(self._text_width(pdf), 16, "Checklist:")

        self._set_text(pdf, 12, COLORS["text"])
        if not items:
            pdf.set_xy(TEXT_X, y + 35)
            pdf.cell(self._text_width(pdf), CHECKLIST_ROW_HEIGHT, _latin1(EMPTY_CHECKLIST_TEXT))
            return y + height + PANEL_GAP

        column_width = (self._text_width(pdf) - 20) / CHECKLIST_PER_ROW
        pdf.set_fill_color(*_hex_to_rgb(COLORS["text"]))
        for index, item in enumerate(items):
            row, column = divmod(index, CHECKLIST_PER_ROW)
            x = TEXT_X if column == 0 else pdf.w / 2
            item_y = y + 35 + row * (CHECKLIST_ROW_HEIGHT + CHECKLIST_ROW_GAP)
            # bullet
            pdf.rect(x, item_y + 6, 3, 3, style="F")
            pdf.set_xy(x + 8, item_y)
            pdf.cell(column_width - 8, CHECKLIST_ROW_HEIGHT, fit_text(pdf, _latin1(item), column_width - 8))

        return y + height + PANEL_GAP

    def _draw_comments_panel(self, pdf: FPDF, y: float, comments: str) -> float:
        y = self._ensure_space(pdf, y, COMMENTS_PANEL_HEIGHT)
        self._draw_panel(pdf, y, COMMENTS_PANEL_HEIGHT)

        pdf.set_xy(TEXT_X, y + 10)
        self._set_text(pdf, 13, COLORS["heading"], "B")
        pdf.cell(self._text_width(pdf), 16, "Comentarios:", new_x="LEFT", new_y="NEXT")

        self._set_text(pdf, 12, COLORS["text"])
        pdf.set_x(TEXT_X)
        width = self._text_width(pdf)
        lines = comment_lines(pdf, _latin1(comments or EMPTY_COMMENTS_TEXT), width)
        pdf.multi_cell(width, COMMENTS_LINE_HEIGHT, "\n".join(lines))
        return y + COMMENTS_PANEL_HEIGHT + PANEL_GAP

    def _draw_signer_panel(self, pdf: FPDF, y: float, technician: str) -> float:
        y = self._ensure_space(pdf, y, SIGNER_PANEL_HEIGHT)
        self._draw_panel(pdf, y, SIGNER_PANEL_HEIGHT)

        pdf.set_xy(TEXT_X, y + 12)
        self._set_text(pdf, 12, COLORS["text"])
        text = f"Encargado del servicio: {technician or EMPTY_TECHNICIAN_TEXT}"
        pdf.cell(self._text_width(pdf), 16, _latin1(text))
        return y + SIGNER_PANEL_HEIGHT + PANEL_GAP

    def _draw_footer(self, pdf: FPDF) -> None:
        """Pin the copyright line to the bottom of the current (first) page."""
        self._set_text(pdf, 10, COLORS["footer"])
        text = _latin1(FOOTER_TEXT)
        x = (pdf.w - pdf.get_string_width(text)) / 2
        pdf.text(x, pdf.h - FOOTER_OFFSET, text)

    def _draw_gallery(self, pdf: FPDF, photo_paths: Sequence[str | Path]) -> int:
        placed = 0
        for index, raw in enumerate(photo_paths):
            if index % PHOTOS_PER_PAGE == 0:
                pdf.add_page()
            path = Path(raw)
            if not path.is_file():
                logger.debug("Photo %s missing, leaving its cell empty", path)
                continue
            x, y = photo_cell_origin(index)
            pdf.image(str(path), x=x, y=y, w=PHOTO_WIDTH, h=PHOTO_HEIGHT, keep_aspect_ratio=True)
            placed += 1
        return placed
