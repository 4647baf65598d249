from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from faktura.core.errors import ValidationError
from faktura.core.invoice import DEFAULT_PAYMENT_CODE, InvoiceData, LineItem, Party
from faktura.core.locales import LANGUAGE_LOCALES
from faktura.core.settings import Settings

# Required party fields per document language; the Serbian invoice is a fiscal
# document and needs the full set of identifiers.
REQUIRED_ISSUER = {
	"sr": ("name", "address", "tax_id", "registration_id", "email", "bank_account"),
	"en": ("name", "address"),
}
REQUIRED_RECIPIENT = {
	"sr": ("name", "address", "tax_id", "registration_id"),
	"en": ("name", "address"),
}

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PAYMENT_CODE = re.compile(r"^\d{3}$")


def _text(value: Any) -> str:
	return str(value).strip() if value is not None else ""


def _parse_date(value: Any) -> Optional[date]:
	if isinstance(value, datetime):
		return value.date()
	if isinstance(value, date):
		return value
	s = _text(value)
	if not s:
		return None
	try:
		return date.fromisoformat(s)
	except ValueError:
		return None


def _number(value: Any) -> Optional[Decimal]:
	if isinstance(value, Decimal):
		return value if value.is_finite() else None
	s = _text(value)
	if not s:
		return None
	try:
		d = Decimal(s)
	except InvalidOperation:
		return None
	return d if d.is_finite() else None


def _party(raw: Mapping[str, Any], prefix: str, required, errors: Dict[str, str]) -> Party:
	fields = {k: _text(raw.get(k)) for k in ("name", "address", "tax_id", "registration_id", "email", "bank_account")}
	# Keep the user's line breaks in the address, drop only outer blank space
	fields["address"] = str(raw.get("address") or "").replace("\r", "").strip()
	for key in required:
		if not fields[key]:
			errors[f"{prefix}.{key}"] = f"{key.replace('_', ' ').capitalize()} is required"
	if fields["email"] and not _EMAIL.match(fields["email"]):
		errors[f"{prefix}.email"] = "Email address is not valid"
	return Party(**fields)


def _items(raw_items: Any, errors: Dict[str, str]) -> List[LineItem]:
	if not isinstance(raw_items, (list, tuple)) or not raw_items:
		errors["items"] = "At least one item is required"
		return []
	items: List[LineItem] = []
	for i, raw in enumerate(raw_items):
		raw = raw if isinstance(raw, Mapping) else {}
		description = str(raw.get("description") or "").replace("\r", "").strip()
		if not description:
			errors[f"items.{i}.description"] = "Description is required"
		if "quantity" in raw or "unit_rate" in raw:
			qty = _number(raw.get("quantity"))
			rate = _number(raw.get("unit_rate"))
			if qty is None or qty <= 0:
				errors[f"items.{i}.quantity"] = "Quantity must be greater than 0"
			if rate is None or rate <= 0:
				errors[f"items.{i}.unit_rate"] = "Rate must be greater than 0"
			items.append(LineItem(description=description, quantity=qty or Decimal("0"), unit_rate=rate or Decimal("0")))
		else:
			amount = _number(raw.get("amount"))
			if amount is None or amount <= 0:
				errors[f"items.{i}.amount"] = "Amount must be greater than 0"
			items.append(LineItem(description=description, amount=amount or Decimal("0")))
	return items


def parse_invoice(raw: Mapping[str, Any], settings: Optional[Settings] = None) -> InvoiceData:
	"""
	Validate a raw form mapping and build InvoiceData.

	Language, currency and payment code left empty in the form come from
	settings (built-in defaults when no settings are given).

	Raises ValidationError carrying every problem found, keyed by field path
	('issuer.tax_id', 'items.0.amount', ...).
	"""
	settings = settings or Settings()
	errors: Dict[str, str] = {}

	language = _text(raw.get("language")) or settings.language
	if language not in LANGUAGE_LOCALES:
		errors["language"] = f"Unsupported language: {language}"
		language = "sr"

	issuer_raw = raw.get("issuer") if isinstance(raw.get("issuer"), Mapping) else {}
	recipient_raw = raw.get("recipient") if isinstance(raw.get("recipient"), Mapping) else {}
	issuer = _party(issuer_raw, "issuer", REQUIRED_ISSUER[language], errors)
	recipient = _party(recipient_raw, "recipient", REQUIRED_RECIPIENT[language], errors)

	number = _text(raw.get("number"))
	if not number:
		errors["number"] = "Invoice number is required"

	issue_date = _parse_date(raw.get("issue_date"))
	if issue_date is None:
		errors["issue_date"] = "Invoice date is required (YYYY-MM-DD)"

	due_date = None
	if _text(raw.get("due_date")):
		due_date = _parse_date(raw.get("due_date"))
		if due_date is None:
			errors["due_date"] = "Due date is not valid (YYYY-MM-DD)"

	items = _items(raw.get("items"), errors)

	tax_rate = _number(raw.get("tax_rate")) if _text(raw.get("tax_rate")) else Decimal("0")
	if tax_rate is None or not (0 <= tax_rate <= 100):
		errors["tax_rate"] = "Tax rate must be between 0 and 100"
		tax_rate = Decimal("0")

	payment_code = _text(raw.get("payment_code")) or settings.payment_code or DEFAULT_PAYMENT_CODE
	if not _PAYMENT_CODE.match(payment_code):
		errors["payment_code"] = "Payment code must be three digits"

	if errors:
		raise ValidationError(errors)

	return InvoiceData(
		issuer=issuer,
		recipient=recipient,
		number=number,
		issue_date=issue_date,  # type: ignore[arg-type]
		items=tuple(items),
		notes=str(raw.get("notes") or "").strip(),
		terms=str(raw.get("terms") or "").strip(),
		payment_code=payment_code,
		tax_rate=tax_rate,
		language=language,
		currency=_text(raw.get("currency")) or settings.currency or "RSD",
		due_date=due_date,
		payment_terms=_text(raw.get("payment_terms")),
	)
