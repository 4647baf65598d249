from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import List

import pytest

from faktura.core.invoice import InvoiceData, LineItem, Party
from faktura.core.paths import bundled_font_path
from faktura.pdf.fonts import FontRegistry
from faktura.pdf.qr_image import QRResult


class MemorySink:
    """Collects handles instead of writing files."""

    def __init__(self) -> None:
        self.saved: List = []

    def save(self, handle):
        self.saved.append(handle)
        return None


class FailingQRProvider:
    def __init__(self) -> None:
        self.calls = 0

    async def render(self, payload, pixel_size, error_correction="M"):
        from faktura.core.errors import QRGenerationError

        self.calls += 1
        return QRResult(error=QRGenerationError("qr backend offline"))


class RaisingQRProvider:
    """Provider that blows up instead of returning a failed result."""

    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    async def render(self, payload, pixel_size, error_correction="M"):
        raise self.exc


class BrokenFontProvider:
    async def fetch(self) -> bytes:
        raise OSError("network down")


@pytest.fixture(scope="session")
def vera_bytes() -> bytes:
    return Path(bundled_font_path("Vera.ttf")).read_bytes()


@pytest.fixture
def body_font(vera_bytes) -> str:
    """Registers Vera under a test family so text_flow/layout can measure with it."""
    return FontRegistry().register(vera_bytes, "TestSans").name


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2026, 10, 18, 9, 30)


@pytest.fixture
def issuer() -> Party:
    return Party(
        name="Test d.o.o.",
        address="Bulevar 1\n11000 Beograd",
        tax_id="100000001",
        registration_id="12345678",
        email="office@test.rs",
        bank_account="160-1234567-89",
    )


@pytest.fixture
def recipient() -> Party:
    return Party(name="Client d.o.o.", address="Ulica 2\n21000 Novi Sad", tax_id="200000002", registration_id="87654321")


@pytest.fixture
def invoice(issuer, recipient) -> InvoiceData:
    return InvoiceData(
        issuer=issuer,
        recipient=recipient,
        number="2026-001",
        issue_date=date(2026, 10, 18),
        items=(
            LineItem("Web development", Decimal("1000")),
            LineItem("Hosting", Decimal("1300.20")),
        ),
        notes="Not in the VAT system.",
    )


@pytest.fixture
def itemized_invoice(issuer, recipient) -> InvoiceData:
    return InvoiceData(
        issuer=issuer,
        recipient=Party(name="Client Inc.", address="99 Market Street"),
        number="INV-7",
        issue_date=date(2026, 10, 18),
        items=(
            LineItem.itemized("Consulting", "12", "85"),
            LineItem.itemized("Travel", "1", "240.75"),
        ),
        tax_rate=Decimal("20"),
        language="en",
        currency="EUR",
        payment_terms="Net 30",
    )


@pytest.fixture
def broken_font_provider() -> BrokenFontProvider:
    return BrokenFontProvider()


@pytest.fixture
def failing_qr() -> FailingQRProvider:
    return FailingQRProvider()


@pytest.fixture
def raising_qr() -> RaisingQRProvider:
    return RaisingQRProvider(RuntimeError("renderer fault"))
