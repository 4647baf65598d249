from __future__ import annotations

import asyncio

import pytest
from reportlab.pdfbase import pdfmetrics

from faktura.core.errors import FontLoadError
from faktura.pdf.fonts import BytesFontProvider, FileFontProvider, FontRegistry


def test_register_is_idempotent(vera_bytes):
    registry = FontRegistry()
    first = registry.register(vera_bytes, "IdemSans")
    second = registry.register(b"", "IdemSans")  # not decoded again
    assert first == second
    assert "IdemSans" in registry
    assert pdfmetrics.stringWidth("abc", "IdemSans", 10) > 0


@pytest.mark.parametrize("data", [b"", b"not a font at all"])
def test_bad_bytes_raise(data):
    with pytest.raises(FontLoadError):
        FontRegistry().register(data, "BrokenSans")


def test_load_from_memory(vera_bytes):
    registry = FontRegistry()
    handle = asyncio.run(registry.load(BytesFontProvider(vera_bytes), "MemSans"))
    assert handle.name == "MemSans"


def test_missing_file_is_font_load_error(tmp_path):
    provider = FileFontProvider(tmp_path / "nope.ttf")
    with pytest.raises(FontLoadError):
        asyncio.run(FontRegistry().load(provider, "GoneSans"))


def test_provider_failure_wrapped(broken_font_provider):
    with pytest.raises(FontLoadError) as exc_info:
        asyncio.run(FontRegistry().load(broken_font_provider, "OfflineSans"))
    assert isinstance(exc_info.value.__cause__, OSError)
