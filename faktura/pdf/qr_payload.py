"""
Payment QR payload (NBS IPS "PR" format).

    K:PR|V:01|C:1|R:<account>|N:<payee>|I:RSD<amount>|SF:<payment code>

Banking apps parse the string verbatim, so field order and separators are fixed.
"""

from __future__ import annotations

import re
from decimal import Decimal

from faktura.core.currency import fmt_plain
from faktura.core.invoice import InvoiceData

_NAME_DISALLOWED = re.compile(r"[^A-Za-z0-9 \-čćđžšČĆĐŽŠ]")
_HYPHEN_RUN = re.compile(r"-{2,}")
_NON_DIGIT = re.compile(r"\D")


def account_digits(account: str) -> str:
    return _NON_DIGIT.sub("", account or "")


def sanitize_name(name: str) -> str:
    """Reduce a payee name to the character set the payload allows.

    'Ša&banović d.o.o.!!' -> 'Šabanović doo'
    """
    s = _NAME_DISALLOWED.sub("", name or "")
    s = _HYPHEN_RUN.sub("-", s)
    return s.strip().strip("-").strip()


def format_payload_amount(total: Decimal) -> str:
    """Two decimals with a comma separator, whatever the document locale."""
    return fmt_plain(total).replace(".", ",")


def encode(data: InvoiceData, total: Decimal) -> str:
    fields = [
        ("K", "PR"),
        ("V", "01"),
        ("C", "1"),
        ("R", account_digits(data.issuer.bank_account)),
        ("N", sanitize_name(data.issuer.name)),
        ("I", f"RSD{format_payload_amount(total)}"),
        ("SF", data.payment_code),
    ]
    return "|".join(f"{key}:{value}" for key, value in fields)
