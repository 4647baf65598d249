from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from faktura.core.currency import round_money_dec, sum_money, to_decimal
from faktura.core.locales import locale_for_language

DEFAULT_PAYMENT_CODE = "221"


@dataclass(frozen=True)
class Party:
	"""Issuer (seller) or recipient (buyer) of an invoice."""

	name: str
	address: str = ""
	tax_id: str = ""
	registration_id: str = ""
	email: str = ""
	bank_account: str = ""


@dataclass(frozen=True)
class LineItem:
	"""
	One invoice row.

	Flat rows carry `amount`; itemized rows carry `quantity` and `unit_rate`
	and their amount is the product of the two.
	"""

	description: str
	amount: Decimal = Decimal("0")
	quantity: Optional[Decimal] = None
	unit_rate: Optional[Decimal] = None

	@classmethod
	def itemized(cls, description: str, quantity: object, unit_rate: object) -> "LineItem":
		return cls(description=description, quantity=to_decimal(quantity), unit_rate=to_decimal(unit_rate))

	@property
	def is_itemized(self) -> bool:
		return self.quantity is not None

	@property
	def total(self) -> Decimal:
		if self.quantity is not None:
			return to_decimal(self.quantity) * to_decimal(self.unit_rate or 0)
		return to_decimal(self.amount)


@dataclass(frozen=True)
class InvoiceData:
	issuer: Party
	recipient: Party
	number: str
	issue_date: date
	items: Tuple[LineItem, ...]
	notes: str = ""
	terms: str = ""
	payment_code: str = DEFAULT_PAYMENT_CODE
	tax_rate: Decimal = Decimal("0")
	language: str = "sr"
	currency: str = "RSD"
	due_date: Optional[date] = None
	payment_terms: str = ""

	@property
	def locale(self) -> str:
		return locale_for_language(self.language)

	@property
	def is_itemized(self) -> bool:
		return any(item.is_itemized for item in self.items)


@dataclass(frozen=True)
class Totals:
	subtotal: Decimal
	tax: Decimal
	total: Decimal
	tax_rate: Decimal = field(default=Decimal("0"))

	@property
	def has_tax(self) -> bool:
		return self.tax_rate > 0


def compute_totals(data: InvoiceData) -> Totals:
	"""Subtotal is the exact sum of line totals; tax is applied on top of it."""
	subtotal = sum_money(item.total for item in data.items)
	rate = to_decimal(data.tax_rate)
	tax = round_money_dec(subtotal * rate / Decimal("100"))
	return Totals(subtotal=subtotal, tax=tax, total=round_money_dec(subtotal + tax), tax_rate=rate)
