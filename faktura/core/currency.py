from __future__ import annotations

from decimal import Decimal, ROUND_HALF_EVEN, InvalidOperation
from typing import Iterable

from faktura.core.locales import get_locale


def to_decimal(x: object) -> Decimal:
	"""Decimal from any number-like value (via str, so 0.1 stays 0.1); garbage becomes 0."""
	if isinstance(x, Decimal):
		return x
	try:
		return Decimal(str(x))
	except (InvalidOperation, ValueError, TypeError):
		return Decimal("0")


def round_money_dec(x: float | Decimal) -> Decimal:
	"""Round to cents with banker's rounding."""
	d = to_decimal(x)
	return d.quantize(Decimal("0.01"), rounding=ROUND_HALF_EVEN)


def sum_money(values: Iterable[float | Decimal]) -> Decimal:
	"""Exact Decimal sum, rounded once at the end; order of values does not matter."""
	total = Decimal("0")
	for v in values:
		total += to_decimal(v)
	return round_money_dec(total)


def fmt_plain(x: float | Decimal) -> str:
	"""Two decimals, no grouping, '.' separator (machine-facing)."""
	return f"{round_money_dec(x):.2f}"


def format_amount(x: float | Decimal, locale: str) -> str:
	"""
	Format a monetary value for display with exactly two fraction digits.

	sr-RS -> '1.234,50', en-US -> '1,234.50'.
	"""
	loc = get_locale(locale)
	s = f"{round_money_dec(x):,.2f}"
	# Swap through a placeholder so '.' and ',' can trade places
	return s.replace(",", "\x00").replace(".", loc.decimal_sep).replace("\x00", loc.group_sep)


def format_money(x: float | Decimal, locale: str, currency: str = "RSD") -> str:
	"""Display amount followed by the currency code, e.g. '1.234,50 RSD'."""
	return f"{format_amount(x, locale)} {currency}".strip()
