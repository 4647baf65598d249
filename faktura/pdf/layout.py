"""
Page composition for a single-page invoice.

The engine only plans: every place_* call reads the cursor, appends draw
commands in top-down page coordinates (points from the top edge) and moves the
cursor forward. pdf_draw.paint() turns the commands into canvas calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from reportlab.lib import colors
from reportlab.lib.colors import Color
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

from faktura.core.currency import format_amount, format_money, to_decimal
from faktura.core.invoice import LineItem, Totals
from faktura.core.locales import get_locale
from faktura.pdf import text_flow


# ===== Layout constants (tweak here) =====
PAGE_SIZE = A4
PAGE_WIDTH, PAGE_HEIGHT = PAGE_SIZE

MARGIN = 20 * mm
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN

# Header band pinned to the page top
HEADER_BAND_HEIGHT = 28 * mm
POST_HEADER_OFFSET = HEADER_BAND_HEIGHT + 8 * mm
TITLE_FONT_SIZE = 24
NUMBER_FONT_SIZE = 13

LABEL_FONT_SIZE = 9
NAME_FONT_SIZE = 12
TEXT_FONT_SIZE = 10
SMALL_FONT_SIZE = 8
LINE_HEIGHT = 13  # body text leading
SECTION_GAP = 6 * mm

# QR block: fixed top-right anchor under the header band
QR_SIZE = 34 * mm
QR_TOP = HEADER_BAND_HEIGHT + 6 * mm
QR_X = PAGE_WIDTH - MARGIN - QR_SIZE
QR_CAPTION_HEIGHT = 5 * mm

# Items table; column positions are fixed relative to the left margin
TABLE_TOP_GAP = 4 * mm
TABLE_HEADER_HEIGHT = 8 * mm
TABLE_LINE_HEIGHT = 12.5
ROW_PADDING = 6
MIN_ROW_HEIGHT = 18
COL_NO_X = MARGIN + 4
COL_DESC_X = MARGIN + 22
COL_AMOUNT_RIGHT = PAGE_WIDTH - MARGIN - 6
COL_RATE_RIGHT = COL_AMOUNT_RIGHT - 90
COL_QTY_RIGHT = COL_RATE_RIGHT - 80
DESC_WIDTH_FLAT = COL_AMOUNT_RIGHT - 100 - COL_DESC_X
DESC_WIDTH_ITEMIZED = COL_QTY_RIGHT - 45 - COL_DESC_X

# Totals box, right-aligned under the table
TOTALS_BOX_WIDTH = 80 * mm
TOTALS_ROW_HEIGHT = 7 * mm
TOTALS_BOX_PADDING = 3 * mm

# Notes / terms
TEXT_BAND_HEIGHT = 7 * mm

# Footer, measured from the page bottom
FOOTER_BASELINE = PAGE_HEIGHT - 11 * mm
FOOTER_RULE = PAGE_HEIGHT - 15 * mm
CONTENT_BOTTOM = FOOTER_RULE - 4 * mm

# Colors
TEXT_COLOR = colors.HexColor("#222222")
MUTED_COLOR = colors.HexColor("#5A5F6B")
RULE_COLOR = colors.HexColor("#C9CED8")
ROW_ALT_COLOR = colors.HexColor("#F1F3F7")
WHITE = colors.white


# ===== Draw commands =====
@dataclass(frozen=True)
class TextCommand:
    x: float
    y: float  # baseline, from page top
    text: str
    font: str
    size: float
    color: Color = TEXT_COLOR
    align: str = "left"  # left | right | center


@dataclass(frozen=True)
class RectCommand:
    x: float
    y: float  # top edge, from page top
    width: float
    height: float
    fill: Optional[Color] = None
    stroke: Optional[Color] = None
    line_width: float = 0.5


@dataclass(frozen=True)
class LineCommand:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Color = RULE_COLOR
    line_width: float = 0.5


@dataclass(frozen=True)
class ImageCommand:
    x: float
    y: float  # top edge, from page top
    width: float
    height: float
    data: bytes


Command = Union[TextCommand, RectCommand, LineCommand, ImageCommand]


# ===== Geometry =====
@dataclass
class LayoutCursor:
    """Vertical drawing offset from the page top. Only ever moves down."""

    offset: float = 0.0

    def advance_to(self, offset: float) -> float:
        self.offset = max(self.offset, float(offset))
        return self.offset


@dataclass(frozen=True)
class ReservedRegion:
    x: float
    top: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class Placement:
    section: str
    top: float
    bottom: float

    @property
    def height(self) -> float:
        return self.bottom - self.top


@dataclass(frozen=True)
class InfoBlock:
    """Party block: caption, prominent name, address, then 'label: value' lines."""

    label: str
    name: str
    address: str = ""
    details: Sequence[Tuple[str, str]] = field(default_factory=tuple)


def row_height(line_count: int) -> float:
    """Height of an items-table row whose description wraps to line_count lines."""
    return max(MIN_ROW_HEIGHT, max(1, line_count) * TABLE_LINE_HEIGHT + ROW_PADDING)


def _fmt_qty(qty: Decimal, locale: str) -> str:
    """Format quantity with up to 3 decimals, no trailing zeros."""
    s = f"{to_decimal(qty):.3f}".rstrip("0").rstrip(".")
    return (s or "0").replace(".", get_locale(locale).decimal_sep)


class LayoutEngine:
    """Plans one page. Create a fresh engine per document."""

    def __init__(self, font: str, bold_font: Optional[str] = None, brand_color: Color | str = "#1B1464"):
        self.font = font
        self.bold_font = bold_font or font
        self.brand = colors.HexColor(brand_color) if isinstance(brand_color, str) else brand_color
        self.brand_light = colors.Color(
            self.brand.red + (1 - self.brand.red) * 0.88,
            self.brand.green + (1 - self.brand.green) * 0.88,
            self.brand.blue + (1 - self.brand.blue) * 0.88,
        )
        self.cursor = LayoutCursor()
        self.reserved: Optional[ReservedRegion] = None
        self.commands: List[Command] = []
        self.placements: List[Placement] = []
        self.row_heights: List[float] = []

    @property
    def overflowed(self) -> bool:
        return self.cursor.offset > CONTENT_BOTTOM

    def _text(self, x: float, y: float, text: str, font: Optional[str] = None, size: float = TEXT_FONT_SIZE,
              color: Color = TEXT_COLOR, align: str = "left") -> None:
        self.commands.append(TextCommand(x, y, str(text), font or self.font, size, color, align))

    def _record(self, section: str, top: float, bottom: float) -> Placement:
        placement = Placement(section, top, bottom)
        self.placements.append(placement)
        return placement

    # ----- sections -----
    def place_header_band(self, title: str, number_line: str, detail_lines: Sequence[str] = ()) -> Placement:
        """Colored band across the page top; title left, number and dates right-aligned.

        The band is pinned to the page, so the cursor goes to a fixed offset
        below it rather than moving relative to its current value.
        """
        self.commands.append(RectCommand(0, 0, PAGE_WIDTH, HEADER_BAND_HEIGHT, fill=self.brand))
        self._text(MARGIN, HEADER_BAND_HEIGHT / 2 + TITLE_FONT_SIZE * 0.35, title, self.bold_font,
                   TITLE_FONT_SIZE, WHITE)
        right = PAGE_WIDTH - MARGIN
        y = 10 * mm
        self._text(right, y, number_line, self.bold_font, NUMBER_FONT_SIZE, WHITE, "right")
        for line in detail_lines:
            y += LABEL_FONT_SIZE + 3
            if y > HEADER_BAND_HEIGHT - 3:
                break
            self._text(right, y, line, self.font, LABEL_FONT_SIZE, WHITE, "right")
        self.cursor.advance_to(POST_HEADER_OFFSET)
        return self._record("header", 0, HEADER_BAND_HEIGHT)

    def place_qr_block(self, png: Optional[bytes], placeholder: str, caption: str = "") -> ReservedRegion:
        """QR image (or a boxed placeholder) at the fixed top-right anchor.

        Not part of the cursor flow: the cursor is left untouched and the
        occupied rectangle is returned so later sections can stay clear of it.
        """
        if png:
            self.commands.append(ImageCommand(QR_X, QR_TOP, QR_SIZE, QR_SIZE, png))
        else:
            self.commands.append(RectCommand(QR_X, QR_TOP, QR_SIZE, QR_SIZE, stroke=RULE_COLOR))
            lines = text_flow.wrap(placeholder, QR_SIZE - 8, self.font, SMALL_FONT_SIZE)
            y = QR_TOP + QR_SIZE / 2 - (len(lines) - 1) * (SMALL_FONT_SIZE + 2) / 2 + SMALL_FONT_SIZE * 0.35
            for line in lines:
                self._text(QR_X + QR_SIZE / 2, y, line, self.font, SMALL_FONT_SIZE, MUTED_COLOR, "center")
                y += SMALL_FONT_SIZE + 2
        if caption:
            self._text(QR_X + QR_SIZE / 2, QR_TOP + QR_SIZE + QR_CAPTION_HEIGHT - 4, caption, self.font,
                       SMALL_FONT_SIZE, MUTED_COLOR, "center")
        self.reserved = ReservedRegion(QR_X, QR_TOP, QR_SIZE, QR_SIZE + QR_CAPTION_HEIGHT)
        self._record("qr", self.reserved.top, self.reserved.bottom)
        return self.reserved

    def place_info_block(self, block: InfoBlock, start_hint: Optional[float] = None) -> Placement:
        top = self.cursor.offset
        if start_hint is not None:
            top = max(top, start_hint)
            if self.reserved is not None:
                top = max(top, self.reserved.bottom)

        y = top + LABEL_FONT_SIZE
        self._text(MARGIN, y, block.label.upper(), self.bold_font, LABEL_FONT_SIZE, self.brand)
        y += NAME_FONT_SIZE + 5
        self._text(MARGIN, y, block.name, self.bold_font, NAME_FONT_SIZE)
        for line in text_flow.wrap(block.address, CONTENT_WIDTH, self.font, TEXT_FONT_SIZE):
            y += LINE_HEIGHT
            self._text(MARGIN, y, line)
        for label, value in block.details:
            if not value:
                continue
            y += LINE_HEIGHT
            self._text(MARGIN, y, f"{label}: {value}")

        self.cursor.advance_to(y + LINE_HEIGHT)
        return self._record("info", top, y)

    def place_items_table(self, items: Sequence[LineItem], locale: str, headers: Mapping[str, str],
                          itemized: bool = False) -> Placement:
        top = self.cursor.offset + TABLE_TOP_GAP
        desc_width = DESC_WIDTH_ITEMIZED if itemized else DESC_WIDTH_FLAT

        self.commands.append(RectCommand(MARGIN, top, CONTENT_WIDTH, TABLE_HEADER_HEIGHT, fill=self.brand))
        hy = top + TABLE_HEADER_HEIGHT / 2 + LABEL_FONT_SIZE * 0.35
        self._text(COL_NO_X, hy, headers["col_no"], self.bold_font, LABEL_FONT_SIZE, WHITE)
        self._text(COL_DESC_X, hy, headers["col_description"], self.bold_font, LABEL_FONT_SIZE, WHITE)
        if itemized:
            self._text(COL_QTY_RIGHT, hy, headers["col_quantity"], self.bold_font, LABEL_FONT_SIZE, WHITE, "right")
            self._text(COL_RATE_RIGHT, hy, headers["col_rate"], self.bold_font, LABEL_FONT_SIZE, WHITE, "right")
        self._text(COL_AMOUNT_RIGHT, hy, headers["col_amount"], self.bold_font, LABEL_FONT_SIZE, WHITE, "right")

        y = top + TABLE_HEADER_HEIGHT
        for idx, item in enumerate(items):
            lines = text_flow.wrap(item.description, desc_width, self.font, TEXT_FONT_SIZE) or [""]
            rh = row_height(len(lines))
            self.row_heights.append(rh)
            if idx % 2 == 0:
                self.commands.append(RectCommand(MARGIN, y, CONTENT_WIDTH, rh, fill=ROW_ALT_COLOR))

            baseline = y + ROW_PADDING / 2 + TABLE_LINE_HEIGHT * 0.75
            self._text(COL_NO_X, baseline, f"{idx + 1}.")
            line_y = baseline
            for line in lines:
                self._text(COL_DESC_X, line_y, line)
                line_y += TABLE_LINE_HEIGHT
            if itemized and item.is_itemized:
                self._text(COL_QTY_RIGHT, baseline, _fmt_qty(item.quantity, locale), align="right")
                self._text(COL_RATE_RIGHT, baseline, format_amount(item.unit_rate or 0, locale), align="right")
            self._text(COL_AMOUNT_RIGHT, baseline, format_amount(item.total, locale), align="right")

            self.commands.append(LineCommand(MARGIN, y + rh, MARGIN + CONTENT_WIDTH, y + rh))
            y += rh

        self.cursor.advance_to(y + SECTION_GAP)
        return self._record("table", top, y)

    def place_totals_box(self, totals: Totals, locale: str, currency: str, labels: Mapping[str, str]) -> Placement:
        rows: List[Tuple[str, Decimal, bool]] = []
        if totals.has_tax:
            rate = f"{to_decimal(totals.tax_rate).normalize():f}".replace(".", get_locale(locale).decimal_sep)
            rows.append((labels["subtotal"], totals.subtotal, False))
            rows.append((f"{labels['tax']} ({rate}%)", totals.tax, False))
        rows.append((labels["total"], totals.total, True))

        top = self.cursor.offset
        x = PAGE_WIDTH - MARGIN - TOTALS_BOX_WIDTH
        height = TOTALS_ROW_HEIGHT * len(rows) + TOTALS_BOX_PADDING
        self.commands.append(RectCommand(x, top, TOTALS_BOX_WIDTH, height, fill=self.brand_light,
                                         stroke=self.brand, line_width=0.8))
        y = top + TOTALS_BOX_PADDING / 2
        for label, value, emphasized in rows:
            y += TOTALS_ROW_HEIGHT
            baseline = y - TOTALS_ROW_HEIGHT / 2 + 3
            font = self.bold_font if emphasized else self.font
            size = NAME_FONT_SIZE if emphasized else TEXT_FONT_SIZE
            self._text(x + TOTALS_BOX_PADDING, baseline, label, font, size)
            self._text(x + TOTALS_BOX_WIDTH - TOTALS_BOX_PADDING, baseline, format_money(value, locale, currency),
                       font, size, align="right")

        self.cursor.advance_to(top + height + SECTION_GAP)
        return self._record("totals", top, top + height)

    def place_text_section(self, title: str, body: str) -> Optional[Placement]:
        """Titled block of wrapped text. Empty or blank body: nothing is placed."""
        if not (body or "").strip():
            return None
        top = self.cursor.offset
        self.commands.append(RectCommand(MARGIN, top, CONTENT_WIDTH, TEXT_BAND_HEIGHT, fill=self.brand_light))
        self._text(MARGIN + 4, top + TEXT_BAND_HEIGHT / 2 + TEXT_FONT_SIZE * 0.35, title, self.bold_font)

        lines = text_flow.wrap(body, CONTENT_WIDTH - 8, self.font, TEXT_FONT_SIZE)
        y = top + TEXT_BAND_HEIGHT + 4
        for i, line in enumerate(lines):
            self._text(MARGIN + 4, y + TEXT_FONT_SIZE + i * LINE_HEIGHT, line)
        bottom = y + text_flow.height_of(lines, LINE_HEIGHT)
        self.cursor.advance_to(bottom + SECTION_GAP)
        return self._record("text", top, bottom)

    def place_footer(self, text: str) -> Placement:
        """Rule and small print at a fixed distance from the page bottom."""
        self.commands.append(LineCommand(MARGIN, FOOTER_RULE, MARGIN + CONTENT_WIDTH, FOOTER_RULE))
        self._text(MARGIN, FOOTER_BASELINE, text, self.font, SMALL_FONT_SIZE, MUTED_COLOR)
        return self._record("footer", FOOTER_RULE, FOOTER_BASELINE)
