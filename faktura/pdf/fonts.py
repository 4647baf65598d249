from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Protocol

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from faktura.core.errors import FontLoadError

logger = logging.getLogger(__name__)


class FontProvider(Protocol):
    """Source of raw TrueType bytes for the document font."""

    async def fetch(self) -> bytes:
        ...


class FileFontProvider:
    """Reads a .ttf from disk in a worker thread."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    async def fetch(self) -> bytes:
        try:
            return await asyncio.to_thread(self.path.read_bytes)
        except OSError as exc:
            raise FontLoadError(f"Cannot read font file {self.path}: {exc}") from exc


class BytesFontProvider:
    """Serves font bytes already held in memory."""

    def __init__(self, data: bytes):
        self.data = data

    async def fetch(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class FamilyHandle:
    """Name under which a face is registered with pdfmetrics."""

    name: str


class FontRegistry:
    """Registers document fonts with reportlab, at most once per family.

    One registry belongs to one render; a second register() call with the same
    family is a no-op that returns the existing handle.
    """

    def __init__(self) -> None:
        self._families: Dict[str, FamilyHandle] = {}

    def __contains__(self, family: str) -> bool:
        return family in self._families

    def register(self, font_bytes: bytes, family: str) -> FamilyHandle:
        if family in self._families:
            return self._families[family]
        if not font_bytes:
            raise FontLoadError(f"Font data for {family!r} is empty")
        try:
            face = TTFont(family, io.BytesIO(font_bytes))
        except Exception as exc:
            raise FontLoadError(f"Cannot decode font {family!r}: {exc}") from exc
        pdfmetrics.registerFont(face)
        handle = FamilyHandle(family)
        self._families[family] = handle
        logger.info("Registered font family %s", family)
        return handle

    async def load(self, provider: FontProvider, family: str) -> FamilyHandle:
        """Fetch bytes from provider and register them under family."""
        if family in self._families:
            return self._families[family]
        try:
            data = await provider.fetch()
        except FontLoadError:
            raise
        except Exception as exc:
            raise FontLoadError(f"Font fetch failed for {family!r}: {exc}") from exc
        return self.register(data, family)
