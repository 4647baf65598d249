"""Printed captions for both document languages."""

from __future__ import annotations

from typing import Dict

LABELS: Dict[str, Dict[str, str]] = {
    "sr": {
        "title": "FAKTURA",
        "number": "Broj",
        "issue_date": "Datum",
        "due_date": "Rok plaćanja",
        "payment_terms": "Uslovi plaćanja",
        "issuer": "Izdavalac",
        "recipient": "Primalac",
        "tax_id": "PIB",
        "registration_id": "Matični broj",
        "email": "Email",
        "bank_account": "Tekući račun",
        "col_no": "#",
        "col_description": "Opis",
        "col_quantity": "Kol.",
        "col_rate": "Cena",
        "col_amount": "Iznos",
        "subtotal": "Osnovica",
        "tax": "PDV",
        "total": "Ukupno za uplatu",
        "notes": "Napomene",
        "terms": "Uslovi",
        "qr_caption": "Skeniraj i plati",
        "qr_unavailable": "QR kod nije dostupan",
        "generated": "Generisano",
    },
    "en": {
        "title": "INVOICE",
        "number": "No.",
        "issue_date": "Invoice Date",
        "due_date": "Due Date",
        "payment_terms": "Terms",
        "issuer": "From",
        "recipient": "Bill To",
        "tax_id": "Tax ID",
        "registration_id": "Reg. No.",
        "email": "Email",
        "bank_account": "Bank Account",
        "col_no": "#",
        "col_description": "Item & Description",
        "col_quantity": "Qty",
        "col_rate": "Rate",
        "col_amount": "Amount",
        "subtotal": "Sub Total",
        "tax": "Tax",
        "total": "Balance Due",
        "notes": "Notes",
        "terms": "Terms & Conditions",
        "qr_caption": "Scan to pay",
        "qr_unavailable": "QR code unavailable",
        "generated": "Generated",
    },
}


def labels_for(language: str) -> Dict[str, str]:
    try:
        return LABELS[language]
    except KeyError:
        raise ValueError(f"Unsupported language: {language}") from None
