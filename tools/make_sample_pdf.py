from __future__ import annotations

import asyncio
import logging
from datetime import date
from pathlib import Path

from faktura.core.settings import Settings
from faktura.core.validation import parse_invoice
from faktura.pdf.renderer import DirectorySink, renderer_from_settings

# Generates one sample document per language for README/demo purposes.

SAMPLE_SR = {
    "language": "sr",
    "number": "2026-001",
    "issue_date": date.today().isoformat(),
    "issuer": {
        "name": "Primer Studio d.o.o.",
        "address": "Bulevar kralja Aleksandra 73\n11000 Beograd",
        "tax_id": "100000000",
        "registration_id": "12345678",
        "email": "kontakt@primer.rs",
        "bank_account": "160-0000000000000-00",
    },
    "recipient": {
        "name": "Klijent d.o.o.",
        "address": "Knez Mihailova 1\n11000 Beograd",
        "tax_id": "200000000",
        "registration_id": "87654321",
    },
    "items": [
        {"description": "Izrada veb sajta", "amount": "120000"},
        {"description": "Održavanje za oktobar", "amount": "15000.50"},
    ],
    "notes": "Obveznik nije u sistemu PDV-a.",
    "terms": "Rok plaćanja 15 dana od dana prometa.",
}

SAMPLE_EN = {
    "language": "en",
    "number": "INV-0042",
    "issue_date": date.today().isoformat(),
    "payment_terms": "Net 30",
    "tax_rate": "20",
    "currency": "EUR",
    "issuer": {
        "name": "Example Studio LLC",
        "address": "1 Main Street\nSpringfield",
        "email": "billing@example.com",
        "bank_account": "160-0000000000000-00",
    },
    "recipient": {"name": "Client Inc.", "address": "99 Market Street\nShelbyville"},
    "items": [
        {"description": "Consulting", "quantity": "12", "unit_rate": "85"},
        {"description": "Travel expenses", "quantity": "1", "unit_rate": "240.75"},
    ],
    "notes": "Thank you for your business.",
}


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    out_dir = Path(__file__).resolve().parents[1] / "assets" / "samples"
    settings = Settings()
    renderer = renderer_from_settings(settings, sink=DirectorySink(out_dir))
    for raw in (SAMPLE_SR, SAMPLE_EN):
        handle = asyncio.run(renderer.render(parse_invoice(raw, settings)))
        print(f"Wrote sample to: {out_dir / handle.file_name}")
        for warning in handle.warnings:
            print(f"  warning: {warning}")


if __name__ == "__main__":
    main()
