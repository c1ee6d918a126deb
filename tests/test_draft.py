from __future__ import annotations

import logging
import re
from datetime import date, datetime
from decimal import Decimal

import pytest

from invoice_builder.draft import InvoiceDraft
from invoice_builder.models import ErrorKind, IndexOutOfRange


def _filled_draft(table) -> InvoiceDraft:
    draft = InvoiceDraft(table=table)
    draft.set_field("from_name", "Acme Studio")
    draft.set_field("from_address", "123 Main St")
    draft.set_field("to_name", "Client Co")
    draft.set_field("to_address", "456 Client Ave")
    draft.set_field("due_date", "2030-01-31")
    first = draft.invoice.items[0]
    draft.update_item(first.row_id, "description", "Design")
    draft.update_item(first.row_id, "quantity", "2")
    draft.update_item(first.row_id, "price", "150.00")
    draft.append_item(description="Hosting", quantity="1", price="50.00")
    return draft


def test_new_draft_defaults(table) -> None:
    draft = InvoiceDraft(table=table)
    invoice = draft.invoice

    assert re.fullmatch(r"INV-\d{4}", invoice.invoice_number)
    assert 1000 <= int(invoice.invoice_number[4:]) <= 9999
    assert invoice.invoice_date == date.today()
    assert invoice.due_date is None
    assert invoice.notes == "Thank you for your business!"
    assert len(invoice.items) == 1
    assert draft.totals.total == 0
    assert draft.tax_label == "0%"


def test_totals_follow_every_edit(table) -> None:
    draft = _filled_draft(table)

    assert draft.totals.subtotal == Decimal("350.00")
    assert draft.totals.tax_amount == 0

    draft.set_jurisdiction("ca")
    assert draft.invoice.tax_jurisdiction == "CA"
    assert draft.totals.tax_amount == Decimal("25.375")
    assert draft.totals.total_display == "$375.38"
    assert draft.tax_label == "7.25%"

    draft.set_jurisdiction(None)
    assert draft.totals.total == Decimal("350.00")


def test_append_then_remove_restores_totals(table) -> None:
    draft = _filled_draft(table)
    draft.set_jurisdiction("CA")
    rows_before = list(draft.invoice.items)
    totals_before = draft.totals

    row = draft.append_item()
    draft.update_item(row.row_id, "price", "99")
    assert draft.totals != totals_before

    draft.remove_item(row.row_id)

    assert list(draft.invoice.items) == rows_before
    assert draft.totals == totals_before


def test_remove_item_at(table) -> None:
    draft = _filled_draft(table)

    removed = draft.remove_item_at(0)

    assert removed.description == "Design"
    assert draft.totals.subtotal == Decimal("50.00")
    with pytest.raises(IndexOutOfRange):
        draft.remove_item_at(5)


def test_line_totals_keyed_by_row_id(table) -> None:
    draft = _filled_draft(table)
    first, second = draft.invoice.items

    assert draft.line_totals() == {first.row_id: "$300.00", second.row_id: "$50.00"}


def test_set_field_parses_dates(table) -> None:
    draft = InvoiceDraft(table=table)

    draft.set_field("invoice_date", datetime(2024, 5, 6, 12, 30))
    draft.set_field("due_date", "6/5/2024")

    assert draft.invoice.invoice_date == date(2024, 5, 6)
    assert draft.invoice.due_date == date(2024, 6, 5)

    draft.set_field("due_date", "")
    assert draft.invoice.due_date is None


def test_set_field_rejects_unknown_names(table) -> None:
    draft = InvoiceDraft(table=table)

    with pytest.raises(ValueError):
        draft.set_field("items", [])
    with pytest.raises(ValueError):
        draft.set_field("total", "1")


def test_unknown_jurisdiction_is_logged(table, caplog) -> None:
    draft = _filled_draft(table)

    with caplog.at_level(logging.WARNING, logger="invoice_builder.draft"):
        draft.set_jurisdiction("ZZ")

    assert draft.totals.tax_amount == 0
    assert "Unknown tax jurisdiction" in caplog.text


def test_submit_success(table) -> None:
    draft = _filled_draft(table)
    draft.set_jurisdiction("CA")

    result = draft.submit()

    assert result.ok
    invoice, totals = result.unwrap()
    assert invoice.due_date == date(2030, 1, 31)
    assert [item.description for item in invoice.items] == ["Design", "Hosting"]
    assert totals.total == Decimal("375.375")


def test_submit_failure_after_removing_all_rows(table) -> None:
    draft = _filled_draft(table)
    for row_id in draft.invoice.items.row_ids():
        draft.remove_item(row_id)

    result = draft.submit()

    assert result.messages == {"items": "Please add at least one item."}
    assert draft.totals.total == 0


def test_submit_with_strict_due_date(table) -> None:
    draft = _filled_draft(table)
    draft.set_field("invoice_date", "2030-02-01")

    assert draft.submit().ok
    assert set(draft.submit(enforce_due_date_order=True).errors) == {"due_date"}


def test_jurisdictions_come_from_table(table) -> None:
    draft = InvoiceDraft(table=table)

    assert ("CA", "California") in draft.jurisdictions()


def test_currency_is_configurable(table) -> None:
    draft = _filled_draft(table)
    draft.currency = "EUR"

    assert draft.totals.total_display == "€350.00"


def test_unparseable_date_is_reported_on_submit(table) -> None:
    draft = _filled_draft(table)

    draft.set_field("due_date", "31/31/2024")

    assert draft.invoice.due_date == "31/31/2024"
    assert draft.to_dict()["due_date"] == "31/31/2024"
    error = draft.submit().errors["due_date"]
    assert error.kind is ErrorKind.INVALID_RANGE
    assert error.message == "Not a valid date."


def test_large_amounts_still_render(table) -> None:
    draft = InvoiceDraft(table=table)
    row = draft.invoice.items[0]

    draft.update_item(row.row_id, "quantity", "1e15")
    draft.update_item(row.row_id, "price", "1e15")

    assert draft.totals.total_display == "$1" + ",000" * 10 + ".00"
    assert draft.line_totals() == {row.row_id: draft.totals.subtotal_display}
