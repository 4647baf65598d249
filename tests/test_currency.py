from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from itertools import permutations

import pytest

from faktura.core.currency import format_amount, format_money, round_money_dec, sum_money
from faktura.core.invoice import LineItem, compute_totals
from faktura.core.locales import format_date, get_locale


@pytest.mark.parametrize(
    "value, locale, expected",
    [
        (Decimal("1234.5"), "sr-RS", "1.234,50"),
        (Decimal("1234.5"), "en-US", "1,234.50"),
        (Decimal("0"), "sr-RS", "0,00"),
        (Decimal("1234567.891"), "sr-RS", "1.234.567,89"),
        (Decimal("999.999"), "en-US", "1,000.00"),
    ],
)
def test_format_amount(value, locale, expected):
    assert format_amount(value, locale) == expected


def test_format_money_appends_currency():
    assert format_money(Decimal("2300.2"), "sr-RS", "RSD") == "2.300,20 RSD"


def test_unknown_locale_rejected():
    with pytest.raises(ValueError):
        format_amount(1, "de-DE")
    with pytest.raises(ValueError):
        get_locale("fr-FR")


def test_round_money_is_bankers_rounding():
    assert round_money_dec(Decimal("0.125")) == Decimal("0.12")
    assert round_money_dec(Decimal("0.135")) == Decimal("0.14")


def test_sum_is_order_independent():
    values = [Decimal("0.10"), Decimal("0.20"), Decimal("1000.333"), Decimal("7")]
    sums = {sum_money(p) for p in permutations(values)}
    assert sums == {Decimal("1007.63")}


def test_format_date_per_locale():
    d = date(2026, 3, 7)
    assert format_date(d, "sr-RS") == "07.03.2026."
    assert format_date(d, "en-US") == "03/07/2026"
    assert format_date(datetime(2026, 3, 7, 14, 5), "sr-RS") == "07.03.2026. 14:05"


def test_totals_without_tax(invoice):
    totals = compute_totals(invoice)
    assert totals.subtotal == Decimal("2300.20")
    assert totals.tax == Decimal("0.00")
    assert totals.total == Decimal("2300.20")
    assert not totals.has_tax


def test_totals_with_tax(itemized_invoice):
    totals = compute_totals(itemized_invoice)
    # 12 * 85 + 240.75
    assert totals.subtotal == Decimal("1260.75")
    assert totals.tax == Decimal("252.15")
    assert totals.total == Decimal("1512.90")
    assert totals.has_tax


def test_totals_ignore_item_order(invoice):
    reordered = replace(invoice, items=tuple(reversed(invoice.items)))
    assert compute_totals(reordered) == compute_totals(invoice)


def test_itemized_line_total():
    item = LineItem.itemized("Hours", "2.5", "40")
    assert item.is_itemized
    assert item.total == Decimal("100.0")
