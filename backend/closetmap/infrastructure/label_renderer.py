"""Barcode Label Rendering — printable Code128 labels via reportlab.

Invariants:
    - render_sheet returns a complete PDF document (A4, 2x2 labels per page)
    - render_barcode returns a standalone SVG document
    - Rendering is synchronous and CPU-bound; callers run it off the event loop
    - An empty label list still yields a valid one-page PDF
"""

import io
from datetime import date

from reportlab.graphics import renderPDF, renderSVG
from reportlab.graphics.barcode import createBarcodeDrawing
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from closetmap.core.collaborator_protocols import BarcodeLabel

LABELS_PER_ROW = 2
LABELS_PER_PAGE = 4
LABEL_WIDTH = 220
LABEL_HEIGHT = 120
PAGE_MARGIN = 50
LABEL_SPACING = 30
BARCODE_HEIGHT = 60
CAPTION_FONT = ("Helvetica", 14)


def _barcode_drawing(code: str, width: float, height: float):
    return createBarcodeDrawing(
        "Code128", value=code, width=width, height=height, humanReadable=True,
    )


def _fit_caption(text: str, max_width: float) -> str:
    font, size = CAPTION_FONT
    if stringWidth(text, font, size) <= max_width:
        return text
    while text and stringWidth(text + "...", font, size) > max_width:
        text = text[:-1]
    return text + "..."


class ReportlabLabelRenderer:
    """LabelRenderer producing PDF sheets and SVG barcodes."""

    def __init__(self, title: str = "Bag Barcodes"):
        self.title = title

    def render_sheet(
        self, labels: list[BarcodeLabel], generated_on: date | None = None,
    ) -> bytes:
        buffer = io.BytesIO()
        page_width, page_height = A4
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.setTitle(self.title)
        footer = f"Generated on {(generated_on or date.today()).isoformat()}"

        self._draw_heading(pdf, page_width, page_height)
        for index, label in enumerate(labels):
            if index > 0 and index % LABELS_PER_PAGE == 0:
                self._draw_footer(pdf, page_width, footer)
                pdf.showPage()
                self._draw_heading(pdf, page_width, page_height)
            slot = index % LABELS_PER_PAGE
            self._draw_label(
                pdf, label,
                col=slot % LABELS_PER_ROW,
                row=slot // LABELS_PER_ROW,
                page_height=page_height,
            )
        self._draw_footer(pdf, page_width, footer)
        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    def render_barcode(self, code: str) -> str:
        drawing = _barcode_drawing(code, LABEL_WIDTH * 1.5, BARCODE_HEIGHT * 1.5)
        return renderSVG.drawToString(drawing)

    def _draw_heading(self, pdf: canvas.Canvas, page_width: float, page_height: float):
        pdf.setFont("Helvetica-Bold", 24)
        pdf.drawCentredString(page_width / 2, page_height - PAGE_MARGIN - 24, self.title)

    def _draw_footer(self, pdf: canvas.Canvas, page_width: float, footer: str):
        pdf.setFont("Helvetica", 10)
        pdf.drawCentredString(page_width / 2, PAGE_MARGIN - 20, footer)

    def _draw_label(
        self, pdf: canvas.Canvas, label: BarcodeLabel,
        col: int, row: int, page_height: float,
    ):
        # Layout measured from the top edge, converted to PDF bottom-left origin
        x = PAGE_MARGIN + col * (LABEL_WIDTH + LABEL_SPACING)
        top = 120 + row * (LABEL_HEIGHT + 60)

        box_top = page_height - (top - 30)
        pdf.rect(x - 10, box_top - (LABEL_HEIGHT + 50), LABEL_WIDTH + 20, LABEL_HEIGHT + 50)

        font, size = CAPTION_FONT
        pdf.setFont(font, size)
        pdf.drawCentredString(
            x + LABEL_WIDTH / 2,
            page_height - (top - 20) - size,
            _fit_caption(label.caption, LABEL_WIDTH),
        )

        drawing = _barcode_drawing(label.code, LABEL_WIDTH - 20, BARCODE_HEIGHT)
        renderPDF.draw(
            drawing, pdf, x + 10, page_height - (top + 10) - BARCODE_HEIGHT,
        )
