"""
Order sheet export: renders cart line items into a paginated A4 PDF.

Layout is fixed: a header band, a table heading, up to
``EXPORT_ITEMS_PER_PAGE`` rows per page, a footer rule and a grand total
box after the last row. All coordinates are PDF points from the top-left.
"""

import os
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Tuple
from urllib.parse import unquote

import fitz  # PyMuPDF

from zee_ordering.config import Settings, settings as default_settings
from zee_ordering.schemas.order_schema import OrderExportIn, OrderLineIn
from zee_ordering.utils.logger import get_logger
from zee_ordering.utils.numbers import format_inr, money

log = get_logger("export")

PAGE_WIDTH = 595
PAGE_HEIGHT = 842
MARGIN_X = 40
TABLE_RIGHT = 555
HEADER_HEIGHT = 80
TABLE_TOP = 90
TABLE_HEAD_HEIGHT = 20
ROW_HEIGHT = 52
SUMMARY_GAP = 20
SUMMARY_WIDTH = 160
SUMMARY_HEIGHT = 45
FOOTER_TOP = 812
NAME_WIDTH = 190
THUMB = 40

REGULAR = "helv"
BOLD = "hebo"
ITALIC = "heit"

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}
_SAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]")


class ExportServiceException(Exception):
    pass


def _rgb(hex_color: str) -> Tuple[float, float, float]:
    h = hex_color.lstrip("#")
    return tuple(int(h[i:i + 2], 16) / 255 for i in (0, 2, 4))


INK = _rgb("#0f172a")
MUTED = _rgb("#64748b")
SOFT = _rgb("#475569")
BODY = _rgb("#334155")
FAINT = _rgb("#94a3b8")
BAND = _rgb("#f8fafc")
DARK = _rgb("#1e293b")
RULE = _rgb("#e2e8f0")
BORDER = _rgb("#cbd5e1")
WHITE = (1.0, 1.0, 1.0)


@dataclass
class PagePlan:
    """Which line items go on which page, and where the total box lands."""

    chunks: List[Tuple[int, int]]
    summary_page: int
    summary_y: float

    @property
    def page_count(self) -> int:
        return max(len(self.chunks), self.summary_page + 1)


@dataclass
class ExportedOrder:
    reference: str
    filename: str
    content: bytes
    page_count: int
    grand_total: Decimal


def plan_pages(item_count: int, per_page: int) -> PagePlan:
    if item_count <= 0:
        raise ExportServiceException("No items to export")
    per_page = max(1, per_page)
    chunks = [
        (start, min(start + per_page, item_count)) for start in range(0, item_count, per_page)
    ]
    last_rows = chunks[-1][1] - chunks[-1][0]
    y = TABLE_TOP + TABLE_HEAD_HEIGHT + last_rows * ROW_HEIGHT + SUMMARY_GAP
    if y + SUMMARY_HEIGHT > FOOTER_TOP - 5:
        return PagePlan(chunks=chunks, summary_page=len(chunks), summary_y=TABLE_TOP + SUMMARY_GAP)
    return PagePlan(chunks=chunks, summary_page=len(chunks) - 1, summary_y=y)


def order_total(items: Iterable[OrderLineIn]) -> Decimal:
    return sum((it.unit_price * it.qty for it in items), Decimal("0"))


def fit_text(text: str, width: float, fontname: str, fontsize: float) -> str:
    """Truncate ``text`` with an ellipsis so it renders within ``width``."""
    if fitz.get_text_length(text, fontname=fontname, fontsize=fontsize) <= width:
        return text
    ellipsis = "..."
    while text and fitz.get_text_length(text + ellipsis, fontname=fontname, fontsize=fontsize) > width:
        text = text[:-1]
    return text.rstrip() + ellipsis


class ExportService:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.settings = settings or default_settings
        self.clock = clock

    def reference_for(self, order_number: Optional[str]) -> str:
        suffix = (order_number or "").strip() or "TEMP"
        return f"{self.settings.ORDER_REF_PREFIX}-{suffix}"

    def render_order(self, order: OrderExportIn) -> ExportedOrder:
        if not order.items:
            raise ExportServiceException("No items to export")

        reference = self.reference_for(order.order_number)
        plan = plan_pages(len(order.items), self.settings.EXPORT_ITEMS_PER_PAGE)
        timestamp = self.clock().strftime("%d %b %Y, %I:%M %p")
        grand_total = order_total(order.items)

        doc = fitz.open()
        try:
            doc.set_metadata({"title": reference, "creator": self.settings.BRAND_NAME})
            for page_no in range(plan.page_count):
                page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
                self._draw_header(page, order, reference, timestamp, page_no + 1, plan.page_count)
                self._draw_footer(page, reference, page_no + 1, plan.page_count)
                if page_no < len(plan.chunks):
                    start, end = plan.chunks[page_no]
                    self._draw_table_head(page, TABLE_TOP)
                    y = TABLE_TOP + TABLE_HEAD_HEIGHT
                    for i in range(start, end):
                        self._draw_row(page, y, i, order.items[i])
                        y += ROW_HEIGHT
                if page_no == plan.summary_page:
                    self._draw_summary(page, plan.summary_y, grand_total)
            content = doc.tobytes(garbage=3, deflate=True)
        finally:
            doc.close()

        log.info(
            "Exported %s: %d items on %d pages, total %s",
            reference,
            len(order.items),
            plan.page_count,
            format_inr(grand_total),
        )
        return ExportedOrder(
            reference=reference,
            filename=f"{_SAFE_FILENAME.sub('_', reference)}.pdf",
            content=content,
            page_count=plan.page_count,
            grand_total=money(grand_total),
        )

    # drawing helpers

    def _text(self, page, x, y, text, size=8, font=REGULAR, color=INK):
        # y is the top of the line box; PyMuPDF positions on the baseline
        page.insert_text(fitz.Point(x, y + size * 0.85), text, fontname=font, fontsize=size, color=color)

    def _text_right(self, page, right, y, text, size=8, font=REGULAR, color=INK):
        width = fitz.get_text_length(text, fontname=font, fontsize=size)
        self._text(page, right - width, y, text, size, font, color)

    def _text_center(self, page, left, width, y, text, size=8, font=REGULAR, color=INK):
        tw = fitz.get_text_length(text, fontname=font, fontsize=size)
        self._text(page, left + (width - tw) / 2, y, text, size, font, color)

    def _draw_header(self, page, order, reference, timestamp, page_no, page_count):
        page.draw_rect(fitz.Rect(0, 0, PAGE_WIDTH, HEADER_HEIGHT), color=None, fill=BAND, width=0)
        self._text(page, MARGIN_X, 25, self.settings.BRAND_NAME, size=20, font=BOLD)
        self._text(page, MARGIN_X, 48, "PREMIUM CATALOG MANAGEMENT SYSTEM", size=7, color=MUTED)

        right_x = 385
        self._text(page, right_x, 25, "ORDER REFERENCE", font=BOLD)
        self._text(page, right_x, 35, reference, color=BODY)
        self._text(page, right_x, 50, "GENERATED ON", font=BOLD)
        self._text(page, right_x, 60, timestamp, color=BODY)

        if order.customer_name:
            self._text(page, MARGIN_X, 60, "CLIENT:", font=BOLD)
            self._text(page, 75, 60, fit_text(order.customer_name.upper(), 250, REGULAR, 8), color=BODY)
        if order.customer_address:
            address = " ".join(order.customer_address.split())
            self._text(page, 75, 69, fit_text(address, 280, REGULAR, 7), size=7, color=MUTED)

        self._text_right(page, TABLE_RIGHT, 70, f"PAGE {page_no} OF {page_count}", size=7, color=FAINT)

    def _draw_footer(self, page, reference, page_no, page_count):
        page.draw_line(
            fitz.Point(MARGIN_X, FOOTER_TOP), fitz.Point(TABLE_RIGHT, FOOTER_TOP), color=RULE, width=0.5
        )
        self._text(page, MARGIN_X, FOOTER_TOP + 6, f"{self.settings.BRAND_NAME} | {reference}", size=6, color=FAINT)
        self._text_right(page, TABLE_RIGHT, FOOTER_TOP + 6, f"{page_no} / {page_count}", size=6, color=FAINT)

    def _draw_table_head(self, page, y):
        page.draw_rect(
            fitz.Rect(MARGIN_X, y, TABLE_RIGHT, y + TABLE_HEAD_HEIGHT), color=None, fill=DARK, width=0
        )
        ty = y + 6
        self._text(page, 45, ty, "S.NO", font=BOLD, color=WHITE)
        self._text(page, 85, ty, "IMAGE", font=BOLD, color=WHITE)
        self._text(page, 140, ty, "PRODUCT DETAILS", font=BOLD, color=WHITE)
        self._text_right(page, 410, ty, "UNIT PRICE", font=BOLD, color=WHITE)
        self._text_center(page, 420, 40, ty, "QTY", font=BOLD, color=WHITE)
        self._text_right(page, 550, ty, "SUBTOTAL", font=BOLD, color=WHITE)

    def _draw_row(self, page, y, index, item: OrderLineIn):
        if index % 2:
            page.draw_rect(fitz.Rect(MARGIN_X, y, TABLE_RIGHT, y + ROW_HEIGHT), color=None, fill=BAND, width=0)

        self._text(page, 45, y + 22, str(index + 1), color=SOFT)
        self._draw_thumbnail(page, y, item.image_url)

        self._text(page, 140, y + 8, fit_text(item.name or "", NAME_WIDTH, BOLD, 9), size=9, font=BOLD)
        self._text(page, 140, y + 21, item.sku or "N/A", size=7, color=MUTED)
        if item.brand:
            self._text(page, 140, y + 30, fit_text(f"Brand: {item.brand}", NAME_WIDTH, REGULAR, 7), size=7, color=SOFT)
        if item.comment and item.comment.strip():
            note = fit_text(f"Note: {' '.join(item.comment.split())}", NAME_WIDTH, ITALIC, 7)
            self._text(page, 140, y + 39, note, size=7, font=ITALIC, color=MUTED)

        self._text_right(page, 410, y + 22, format_inr(item.unit_price), size=9)
        self._text_center(page, 420, 40, y + 22, f"x{item.qty}", size=9, font=BOLD)
        self._text_right(page, 550, y + 22, format_inr(item.subtotal), size=9, font=BOLD)

        page.draw_line(
            fitz.Point(MARGIN_X, y + ROW_HEIGHT), fitz.Point(TABLE_RIGHT, y + ROW_HEIGHT), color=RULE, width=0.1
        )

    def _draw_thumbnail(self, page, y, image_url: Optional[str]):
        box = fitz.Rect(75, y + 6, 75 + THUMB, y + 6 + THUMB)
        path = self.resolve_image(image_url)
        if path:
            try:
                page.insert_image(box, filename=path, keep_proportion=True)
                return
            except Exception as e:
                log.warning("Could not draw image %s: %s", image_url, e)
                self._text(page, 75, y + 22, "IMG ERR", size=5, color=FAINT)
                return
        page.draw_rect(box, color=BORDER, width=0.2)
        self._text_center(page, 75, THUMB, y + 24, "NO IMAGE", size=6, color=FAINT)

    def _draw_summary(self, page, y, grand_total: Decimal):
        x = TABLE_RIGHT - SUMMARY_WIDTH
        page.draw_rect(fitz.Rect(x, y, TABLE_RIGHT, y + SUMMARY_HEIGHT), color=None, fill=DARK, width=0)
        self._text(page, x + 12, y + 10, f"GRAND TOTAL ({self.settings.CURRENCY})", size=7, color=FAINT)
        self._text_right(page, TABLE_RIGHT - 13, y + 22, format_inr(grand_total), size=13, font=BOLD, color=WHITE)

    def resolve_image(self, image_url: Optional[str]) -> Optional[str]:
        """
        Map a public URL such as ``/uploads/7-1700000000.png`` to a readable
        file under PUBLIC_DIR. Remote URLs and paths escaping PUBLIC_DIR give None.
        """
        if not image_url or "://" in image_url:
            return None
        public_dir = os.path.realpath(self.settings.PUBLIC_DIR)
        relative = unquote(image_url).replace("\\", "/").lstrip("/")
        path = os.path.realpath(os.path.join(public_dir, relative))
        if os.path.commonpath([public_dir, path]) != public_dir:
            return None
        if os.path.splitext(path)[1].lower() not in IMAGE_EXTENSIONS:
            return None
        if not os.access(path, os.R_OK) or not os.path.isfile(path):
            log.warning("Media unavailable: %s", image_url)
            return None
        return path
