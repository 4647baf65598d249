from __future__ import annotations

from typing import List, Sequence

from reportlab.pdfbase import pdfmetrics


def _wrap_logical_line(text: str, max_width: float, font_name: str, font_size: float) -> List[str]:
    words = text.split()
    if not words:
        return [""]
    lines: List[str] = []
    line: List[str] = []
    width_fn = pdfmetrics.stringWidth

    for w in words:
        trial = " ".join(line + [w])
        if width_fn(trial, font_name, font_size) <= max_width or not line:
            # A word wider than max_width still gets a line of its own
            line.append(w)
        else:
            lines.append(" ".join(line))
            line = [w]
    if line:
        lines.append(" ".join(line))
    return lines


def wrap(text: str, max_width: float, font_name: str, font_size: float) -> List[str]:
    """Wrap text into lines no wider than max_width in the given font.

    Explicit newlines are kept as line breaks (a blank line stays blank);
    each logical line is then filled greedily, breaking at whitespace.
    There is no hyphenation: an over-long word overflows on its own line.

    Widths come from pdfmetrics, so font_name must already be registered.
    """
    text = (text or "").replace("\r", "")
    if not text.strip():
        return []
    lines: List[str] = []
    for logical in text.split("\n"):
        lines.extend(_wrap_logical_line(logical, max_width, font_name, font_size))
    return lines


def height_of(lines: Sequence[str], line_height: float) -> float:
    """Vertical space taken by a block of wrapped lines (never less than one line)."""
    return max(1, len(lines)) * line_height
