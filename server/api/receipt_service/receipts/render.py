"""
Receipt layout: logo, order id/time lines, a two-column item table and a QR
code carrying the whole transaction.

All offsets are measured from the top edge of the page in millimetres; reportlab
draws from the bottom-left corner, so `_y()` flips them.
"""
import io, json, logging, os
from typing import Any, Dict, List, Optional, Tuple
from xml.sax.saxutils import escape

from reportlab.graphics import renderPDF
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing
from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, Table, TableStyle

logger = logging.getLogger(__name__)

PAGE_WIDTH_MM = 80
BASE_HEIGHT_MM = 100
ROW_HEIGHT_MM = 10
QR_RESERVE_MM = 50

# keys carried by the payload as metadata, never rendered as rows
RESERVED_KEYS = ("id", "time")

LOGO_X_MM, LOGO_TOP_MM, LOGO_SIZE_MM = 25, 10, 30
ID_LINE_MM, TIME_LINE_MM = 45, 50
TEXT_X_MM = 10
TABLE_TOP_MM = 60
TABLE_HEADER = ("Item Name", "Quantity")
QR_X_MM, QR_GAP_MM, QR_SIZE_MM = 20, 10, 40

CELL_STYLE = ParagraphStyle("receipt-cell", fontName="Helvetica", fontSize=10, leading=12)

def page_height(field_count: int) -> float:
    return BASE_HEIGHT_MM + field_count * ROW_HEIGHT_MM + QR_RESERVE_MM

def _cell(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))

def table_rows(payload: Dict[str, Any]) -> List[Tuple[str, str]]:
    return [(str(k), _cell(v)) for k, v in payload.items() if k not in RESERVED_KEYS]

def qr_content(identifier: str, timestamp: str, payload: Dict[str, Any]) -> str:
    # payload key order is kept so the code reproduces exactly what was rendered
    return json.dumps({"id": identifier, "time": timestamp, "items": payload},
                      ensure_ascii=False, separators=(",", ":"))

def parse_qr_content(content: str) -> Tuple[str, str, Dict[str, Any]]:
    obj = json.loads(content)
    return obj["id"], obj["time"], obj["items"]

class ReceiptDocument:
    """One rendered page; lives only until `to_bytes()` has been called."""

    def __init__(self, identifier: str, timestamp: str, rows: List[Tuple[str, str]], qr: str, height_mm: float):
        self.identifier = identifier
        self.timestamp = timestamp
        self.rows = rows
        self.qr_content = qr
        self.height_mm = height_mm
        self.table_bottom_mm: Optional[float] = None
        self._buf = io.BytesIO()
        # invariant=1 pins creation date and document id so output is reproducible
        self._canvas = canvas.Canvas(self._buf, pagesize=(PAGE_WIDTH_MM * mm, height_mm * mm), invariant=1)
        self._data: Optional[bytes] = None

    def _y(self, top_mm: float) -> float:
        return (self.height_mm - top_mm) * mm

    def draw_logo(self, path: str) -> bool:
        if not os.path.exists(path):
            logger.warning("Logo file not found: %s", path)
            return False
        size = LOGO_SIZE_MM * mm
        self._canvas.drawImage(path, LOGO_X_MM * mm, self._y(LOGO_TOP_MM) - size, width=size, height=size, mask="auto")
        return True

    def draw_identity(self) -> None:
        c = self._canvas
        c.setFont("Helvetica", 12)
        c.drawString(TEXT_X_MM * mm, self._y(ID_LINE_MM), f"Order ID: {self.identifier}")
        c.drawString(TEXT_X_MM * mm, self._y(TIME_LINE_MM), f"Time: {self.timestamp}")

    def draw_table(self) -> float:
        col = (PAGE_WIDTH_MM - 2 * TEXT_X_MM) / 2 * mm
        # Paragraph cells wrap long names and values inside their column
        body = [[Paragraph(escape(k), CELL_STYLE), Paragraph(escape(v), CELL_STYLE)] for k, v in self.rows]
        t = Table([list(TABLE_HEADER)] + body, colWidths=[col, col])
        t.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("LEFTPADDING", (0, 0), (-1, -1), 3 * mm),
            ("RIGHTPADDING", (0, 0), (-1, -1), 3 * mm),
            ("TOPPADDING", (0, 0), (-1, -1), 3 * mm),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3 * mm),
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2980ba")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ]))
        _, h = t.wrapOn(self._canvas, PAGE_WIDTH_MM * mm, self.height_mm * mm)
        t.drawOn(self._canvas, TEXT_X_MM * mm, self._y(TABLE_TOP_MM) - h)
        self.table_bottom_mm = TABLE_TOP_MM + h / mm
        return self.table_bottom_mm

    def draw_qr(self) -> None:
        top = (self.table_bottom_mm if self.table_bottom_mm is not None else TABLE_TOP_MM) + QR_GAP_MM
        size = QR_SIZE_MM * mm
        widget = QrCodeWidget(self.qr_content)
        widget.barWidth = size
        widget.barHeight = size
        d = Drawing(size, size)
        d.add(widget)
        renderPDF.draw(d, self._canvas, QR_X_MM * mm, self._y(top) - size)

    def to_bytes(self) -> bytes:
        if self._data is None:
            self._canvas.showPage()
            self._canvas.save()
            self._data = self._buf.getvalue()
            self._buf.close()
        return self._data

def render_receipt(identifier: str, timestamp: str, payload: Dict[str, Any], logo_path: str) -> ReceiptDocument:
    rows = table_rows(payload)
    doc = ReceiptDocument(identifier, timestamp, rows, qr_content(identifier, timestamp, payload), page_height(len(rows)))
    doc.draw_logo(logo_path)
    doc.draw_identity()
    doc.draw_table()
    doc.draw_qr()
    return doc
