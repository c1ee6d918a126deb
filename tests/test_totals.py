from __future__ import annotations

import itertools
from decimal import Decimal

import pytest

from invoice_builder.models import LineItem
from invoice_builder.totals import compute_totals


def _scenario_items() -> list[LineItem]:
    return [
        LineItem(description="Design", quantity=2, price=Decimal("150.00")),
        LineItem(description="Hosting", quantity=1, price=Decimal("50.00")),
    ]


def test_california_scenario(table) -> None:
    totals = compute_totals(_scenario_items(), "CA", table)

    assert totals.subtotal == Decimal("350.00")
    assert totals.tax_rate == Decimal("0.0725")
    assert totals.tax_amount == Decimal("25.375")
    assert totals.total == Decimal("375.375")
    assert totals.tax_display == "$25.38"
    assert totals.total_display == "$375.38"
    assert totals.subtotal_display == "$350.00"


def test_no_jurisdiction_means_no_tax(table) -> None:
    totals = compute_totals(_scenario_items(), None, table)

    assert totals.tax_rate == 0
    assert totals.tax_amount == 0
    assert totals.total == Decimal("350.00")


@pytest.mark.parametrize("jurisdiction", ["ZZ", "", "   "])
def test_unknown_or_blank_jurisdiction_is_zero_rate(table, jurisdiction) -> None:
    totals = compute_totals(_scenario_items(), jurisdiction, table)

    assert totals.tax_amount == 0
    assert totals.total == totals.subtotal


def test_jurisdiction_key_is_case_insensitive(table) -> None:
    totals = compute_totals(_scenario_items(), "ca", table)

    assert totals.tax_rate == Decimal("0.0725")


def test_subtotal_ignores_item_order(table) -> None:
    items = [
        LineItem(quantity="3", price="0.10"),
        LineItem(quantity="1.5", price="19.99"),
        LineItem(quantity=7, price=0),
        LineItem(quantity="2", price="1234.56"),
    ]
    expected = sum(
        (Decimal(str(i.quantity)) * Decimal(str(i.price)) for i in items),
        Decimal("0"),
    )

    for ordering in itertools.permutations(items):
        totals = compute_totals(ordering, "NY", table)
        assert totals.subtotal == expected
        assert totals.tax_amount == totals.subtotal * Decimal("0.04")
        assert totals.total == totals.subtotal + totals.tax_amount


def test_partial_rows_contribute_zero(table) -> None:
    items = [
        LineItem(description="Design", quantity=2, price="150"),
        LineItem(quantity="", price="10"),
        LineItem(quantity="abc", price="10"),
        LineItem(quantity=None, price=None),
        LineItem(quantity="2", price="1."),
        LineItem(quantity="NaN", price="5"),
    ]

    totals = compute_totals(items, "CA", table)

    assert totals.subtotal == Decimal("302")


def test_accepts_mappings(table) -> None:
    rows = [{"quantity": "2", "price": "150"}, {"quantity": 1}]

    totals = compute_totals(rows, None, table)

    assert totals.subtotal == Decimal("300")


def test_empty_items(table) -> None:
    totals = compute_totals([], "CA", table)

    assert totals.subtotal == 0
    assert totals.total == 0


def test_float_inputs_stay_exact(table) -> None:
    totals = compute_totals([LineItem(quantity=3, price=0.1)], None, table)

    assert totals.subtotal == Decimal("0.3")


def test_uses_configured_table_by_default() -> None:
    totals = compute_totals(_scenario_items(), "CA")

    assert totals.tax_rate == Decimal("0.0725")


def test_zero_rate_jurisdiction(table) -> None:
    totals = compute_totals(_scenario_items(), "OR", table)

    assert totals.tax_amount == 0
    assert totals.total == Decimal("350.00")


def test_huge_amounts_do_not_raise(table) -> None:
    items = [LineItem(quantity="1e500000", price="1e500000")]

    totals = compute_totals(items, None, table)

    assert totals.subtotal.is_infinite()
    assert not totals.total.is_finite()
    assert totals.total_display == "N/A"
    assert items[0].line_total.is_infinite()


def test_huge_amounts_with_tax_do_not_raise(table) -> None:
    items = [LineItem(quantity="1e500000", price="1e500000")]

    totals = compute_totals(items, "CA", table)

    assert not totals.tax_amount.is_finite()
    assert totals.tax_display == "N/A"
