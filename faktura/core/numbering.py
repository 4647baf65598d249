from __future__ import annotations

import re
from datetime import date
from typing import Optional

# Document language -> downloadable file name prefix
FILE_PREFIXES = {
	"sr": "faktura",
	"en": "invoice",
}

_UNSAFE = re.compile(r"[^\w.-]+", re.UNICODE)


def default_invoice_number(today: Optional[date] = None) -> str:
	"""Return today's date as a compact invoice number, e.g. '20261018'."""
	return (today or date.today()).strftime("%Y%m%d")


def document_file_name(number: str, language: str = "sr", ext: str = "pdf") -> str:
	"""
	Derive the file name of a generated document from the invoice number.

	'2026/14' in Serbian -> 'faktura-2026-14.pdf'. Characters that cannot
	appear in a file name are replaced with '-'.
	"""
	prefix = FILE_PREFIXES.get(language, FILE_PREFIXES["en"])
	safe = _UNSAFE.sub("-", str(number or "").strip()).strip("-.") or "bez-broja"
	return f"{prefix}-{safe}.{ext}"
