from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Tuple

from faktura.core.errors import QRGenerationError, RenderError
from faktura.core.invoice import InvoiceData, Party, compute_totals
from faktura.core.locales import format_date
from faktura.core.numbering import document_file_name
from faktura.core.settings import Settings
from faktura.pdf import qr_payload
from faktura.pdf.fonts import FileFontProvider, FontProvider, FontRegistry
from faktura.pdf.labels import labels_for
from faktura.pdf.layout import InfoBlock, LayoutEngine
from faktura.pdf.pdf_draw import build_pdf_bytes
from faktura.pdf.qr_image import QRCodeImageProvider, QRImageProvider, QRResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentHandle:
    """A finished document ready to be handed to the user."""

    file_name: str
    content: bytes
    warnings: Tuple[str, ...] = ()
    media_type: str = "application/pdf"

    def save(self, directory: Path | str) -> Path:
        out_dir = Path(directory)
        out_dir.mkdir(parents=True, exist_ok=True)
        out = out_dir / self.file_name
        out.write_bytes(self.content)
        return out


class DocumentSink(Protocol):
    def save(self, handle: DocumentHandle) -> Optional[Path]:
        ...


class DirectorySink:
    """Writes each finished document into a directory (the "download")."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def save(self, handle: DocumentHandle) -> Path:
        out = handle.save(self.directory)
        logger.info("PDF saved: %s", out)
        return out


@dataclass(frozen=True)
class RenderOptions:
    font_family: str = "FakturaSans"
    qr_pixel_size: int = 300
    qr_error_correction: str = "M"
    brand_color: str = "#1B1464"

    @classmethod
    def from_settings(cls, settings: Settings) -> "RenderOptions":
        return cls(
            font_family=settings.font_family,
            qr_pixel_size=settings.qr_pixel_size,
            qr_error_correction=settings.qr_error_correction,
            brand_color=settings.brand_color,
        )


def _party_block(label: str, party: Party, labels: dict) -> InfoBlock:
    return InfoBlock(
        label=label,
        name=party.name,
        address=party.address,
        details=(
            (labels["tax_id"], party.tax_id),
            (labels["registration_id"], party.registration_id),
            (labels["email"], party.email),
            (labels["bank_account"], party.bank_account),
        ),
    )


class InvoiceRenderer:
    """Turns validated InvoiceData into a one-page PDF and hands it to a sink.

    Font fetch and QR generation are the only awaited steps; layout and
    painting run synchronously. Nothing is shared between render() calls:
    each one builds its own font registry, layout engine and QR payload.
    """

    def __init__(
        self,
        font_provider: FontProvider,
        sink: DocumentSink,
        qr_provider: Optional[QRImageProvider] = None,
        bold_font_provider: Optional[FontProvider] = None,
        options: Optional[RenderOptions] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.font_provider = font_provider
        self.bold_font_provider = bold_font_provider
        self.sink = sink
        self.qr_provider = qr_provider or QRCodeImageProvider()
        self.options = options or RenderOptions()
        self.clock = clock

    async def render(self, data: InvoiceData) -> DocumentHandle:
        """Build the document and save it through the sink.

        Raises RenderError when the document cannot be produced; in that case
        the sink is never called. A failed QR image only adds a warning.
        """
        logger.info("Rendering invoice %s", data.number)
        try:
            handle = await self._build(data)
            self.sink.save(handle)
        except RenderError:
            raise
        except Exception as exc:
            logger.exception("Could not generate invoice %s", data.number)
            raise RenderError("Could not generate document", cause=exc) from exc
        logger.info("Invoice %s rendered (%d bytes)", data.number, len(handle.content))
        return handle

    async def _qr_image(self, payload: str) -> QRResult:
        try:
            return await self.qr_provider.render(
                payload, self.options.qr_pixel_size, self.options.qr_error_correction
            )
        except QRGenerationError as exc:
            return QRResult(error=exc)
        except Exception as exc:
            # Any provider fault degrades to the placeholder like a QR error
            logger.warning("QR provider raised %r", exc)
            error = QRGenerationError(f"QR generation failed: {exc}")
            error.__cause__ = exc
            return QRResult(error=error)

    async def _build(self, data: InvoiceData) -> DocumentHandle:
        labels = labels_for(data.language)
        locale = data.locale
        totals = compute_totals(data)
        warnings: List[str] = []

        registry = FontRegistry()
        family = self.options.font_family
        regular = await registry.load(self.font_provider, family)
        bold = regular
        if self.bold_font_provider is not None:
            bold = await registry.load(self.bold_font_provider, f"{family}-Bold")

        engine = LayoutEngine(regular.name, bold.name, self.options.brand_color)

        header_lines = [f"{labels['issue_date']}: {format_date(data.issue_date, locale)}"]
        if data.due_date:
            header_lines.append(f"{labels['due_date']}: {format_date(data.due_date, locale)}")
        if data.payment_terms:
            header_lines.append(f"{labels['payment_terms']}: {data.payment_terms}")
        engine.place_header_band(labels["title"], f"{labels['number']} {data.number}", header_lines)

        payload = qr_payload.encode(data, totals.total)
        qr = await self._qr_image(payload)
        if not qr.ok:
            logger.warning("Invoice %s: drawing QR placeholder (%s)", data.number, qr.error)
            warnings.append(labels["qr_unavailable"])
        region = engine.place_qr_block(qr.png if qr.ok else None, labels["qr_unavailable"], labels["qr_caption"])

        engine.place_info_block(_party_block(labels["issuer"], data.issuer, labels), start_hint=region.bottom)
        engine.place_info_block(_party_block(labels["recipient"], data.recipient, labels), start_hint=region.bottom)
        engine.place_items_table(data.items, locale, labels, itemized=data.is_itemized)
        engine.place_totals_box(totals, locale, data.currency, labels)
        engine.place_text_section(labels["notes"], data.notes)
        engine.place_text_section(labels["terms"], data.terms)
        engine.place_footer(f"{labels['generated']}: {format_date(self.clock(), locale)}")

        if engine.overflowed:
            # Single page only: content is drawn where it lands
            logger.warning("Invoice %s runs past the bottom margin", data.number)
            warnings.append("Content runs past the bottom margin")

        content = build_pdf_bytes(
            engine.commands,
            title=f"{labels['title'].capitalize()} {data.number}",
            author=data.issuer.name,
        )
        return DocumentHandle(document_file_name(data.number, data.language), content, tuple(warnings))


def renderer_from_settings(settings: Settings, sink: Optional[DocumentSink] = None) -> InvoiceRenderer:
    """Wire the default file-backed collaborators from Settings."""
    bold_path = settings.resolved_bold_font_path()
    return InvoiceRenderer(
        font_provider=FileFontProvider(settings.resolved_font_path()),
        bold_font_provider=FileFontProvider(bold_path) if bold_path else None,
        sink=sink or DirectorySink(settings.resolved_output_dir()),
        options=RenderOptions.from_settings(settings),
    )
