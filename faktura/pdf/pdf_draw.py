from __future__ import annotations

import io
from typing import Iterable, Optional

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas

from faktura.pdf.layout import (
    PAGE_HEIGHT,
    PAGE_SIZE,
    Command,
    ImageCommand,
    LineCommand,
    RectCommand,
    TextCommand,
)


def _pdf_y(offset: float) -> float:
    # Layout works top-down; PDF space grows upwards from the bottom edge
    return PAGE_HEIGHT - offset


def _draw_text(c: Canvas, cmd: TextCommand) -> None:
    c.setFillColor(cmd.color)
    c.setFont(cmd.font, cmd.size)
    y = _pdf_y(cmd.y)
    if cmd.align == "right":
        c.drawRightString(cmd.x, y, cmd.text)
    elif cmd.align == "center":
        c.drawCentredString(cmd.x, y, cmd.text)
    else:
        c.drawString(cmd.x, y, cmd.text)


def _draw_rect(c: Canvas, cmd: RectCommand) -> None:
    if cmd.fill is not None:
        c.setFillColor(cmd.fill)
    if cmd.stroke is not None:
        c.setStrokeColor(cmd.stroke)
        c.setLineWidth(cmd.line_width)
    c.rect(
        cmd.x,
        _pdf_y(cmd.y + cmd.height),
        cmd.width,
        cmd.height,
        stroke=1 if cmd.stroke is not None else 0,
        fill=1 if cmd.fill is not None else 0,
    )


def _draw_line(c: Canvas, cmd: LineCommand) -> None:
    c.setStrokeColor(cmd.color)
    c.setLineWidth(cmd.line_width)
    c.line(cmd.x1, _pdf_y(cmd.y1), cmd.x2, _pdf_y(cmd.y2))


def _draw_image(c: Canvas, cmd: ImageCommand) -> None:
    c.drawImage(
        ImageReader(io.BytesIO(cmd.data)),
        cmd.x,
        _pdf_y(cmd.y + cmd.height),
        width=cmd.width,
        height=cmd.height,
        preserveAspectRatio=True,
        mask="auto",
    )


_DISPATCH = {
    TextCommand: _draw_text,
    RectCommand: _draw_rect,
    LineCommand: _draw_line,
    ImageCommand: _draw_image,
}


def paint(c: Canvas, commands: Iterable[Command]) -> None:
    """Execute a layout plan on a reportlab canvas, in order."""
    for cmd in commands:
        _DISPATCH[type(cmd)](c, cmd)


# ===== Public API =====
def build_pdf_bytes(commands: Iterable[Command], title: str = "", author: Optional[str] = None) -> bytes:
    """Paint a one-page plan onto an A4 canvas and return the PDF bytes."""
    buf = io.BytesIO()
    c = Canvas(buf, pagesize=PAGE_SIZE)
    if author:
        c.setAuthor(str(author))
    if title:
        c.setTitle(title)
    c.setLineWidth(0.5)
    paint(c, commands)
    c.showPage()
    c.save()
    return buf.getvalue()
