"""
QR image generation for the payment block.

Wraps the `qrcode` library behind a small result type so callers can branch
on success instead of guarding every call with try/except.
"""

from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import qrcode
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q

from faktura.core.errors import QRGenerationError

logger = logging.getLogger(__name__)

ERROR_CORRECTION_LEVELS = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}


@dataclass(frozen=True)
class QRResult:
    png: Optional[bytes] = None
    error: Optional[QRGenerationError] = None

    @property
    def ok(self) -> bool:
        return self.png is not None and self.error is None


class QRImageProvider(Protocol):
    async def render(self, payload: str, pixel_size: int, error_correction: str = "M") -> QRResult:
        ...


def make_qr_png(payload: str, pixel_size: int = 300, error_correction: str = "M", border: int = 2) -> bytes:
    """Return the QR code for payload as PNG bytes, roughly pixel_size wide.

    Raises QRGenerationError for an empty payload, an unknown error-correction
    level, or any failure inside the qrcode library.
    """
    if not payload:
        raise QRGenerationError("QR payload is empty")
    level = ERROR_CORRECTION_LEVELS.get(str(error_correction).upper())
    if level is None:
        raise QRGenerationError(f"Unknown error correction level: {error_correction}")
    try:
        qr = qrcode.QRCode(error_correction=level, box_size=1, border=border)
        qr.add_data(payload)
        qr.make(fit=True)
        # Pick the module size that gets closest to the requested width
        qr.box_size = max(1, int(pixel_size) // (qr.modules_count + 2 * border))
        img = qr.make_image(fill_color="black", back_color="white")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
    except Exception as exc:
        raise QRGenerationError(f"QR generation failed: {exc}") from exc
    return buf.getvalue()


class QRCodeImageProvider:
    """Default provider: renders with `qrcode` + Pillow off the event loop."""

    def __init__(self, border: int = 2):
        self.border = border

    async def render(self, payload: str, pixel_size: int, error_correction: str = "M") -> QRResult:
        try:
            png = await asyncio.to_thread(make_qr_png, payload, pixel_size, error_correction, self.border)
        except QRGenerationError as exc:
            logger.warning("QR image unavailable: %s", exc)
            return QRResult(error=exc)
        return QRResult(png=png)
