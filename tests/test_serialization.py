from __future__ import annotations

import json
from datetime import date
from decimal import Decimal

from invoice_builder.lib import objects
from invoice_builder.models import ErrorKind, deserialize_invoice, serialize_invoice
from invoice_builder.validation import validate


def test_serialize_invoice_shape(valid_invoice) -> None:
    data = serialize_invoice(valid_invoice)

    assert data["invoice_date"] == "2024-03-01"
    assert data["from"] == {
        "name": "Acme Studio",
        "address": "123 Main St, Anytown, USA",
    }
    assert data["items"][0]["description"] == "Design"
    assert data["items"][0]["row_id"] == valid_invoice.items[0].row_id
    json.dumps(data)


def test_deserialize_restores_draft(valid_invoice) -> None:
    restored = deserialize_invoice(serialize_invoice(valid_invoice))

    assert restored.to_name == valid_invoice.to_name
    assert restored.due_date == date(2024, 3, 31)
    assert restored.items.row_ids() == valid_invoice.items.row_ids()
    assert [item.line_total for item in restored.items] == [
        Decimal("300.00"),
        Decimal("50.00"),
    ]


def test_deserialize_tolerates_partial_payload() -> None:
    invoice = deserialize_invoice(
        {
            "invoice_number": "INV-1",
            "invoice_date": "",
            "items": [{"description": "Design"}],
        }
    )

    assert invoice.from_name == ""
    assert invoice.to_address == ""
    assert invoice.invoice_date is None
    assert invoice.tax_jurisdiction is None
    assert invoice.items[0].quantity is None

    result = validate(invoice)
    assert "items.0.quantity" in result.errors
    assert "from_name" in result.errors


def test_validated_invoice_to_json(valid_invoice, table) -> None:
    valid_invoice.tax_jurisdiction = "CA"
    invoice, totals = validate(valid_invoice, table).unwrap()

    payload = json.loads(objects.to_json({"invoice": invoice, "totals": totals}))

    assert payload["invoice"]["due_date"] == "2024-03-31"
    assert payload["invoice"]["items"][0] == {
        "description": "Design",
        "quantity": "2",
        "price": "150.00",
        "line_total": "300.00",
    }
    assert payload["invoice"]["tax_jurisdiction"] == "CA"
    assert Decimal(payload["totals"]["tax_amount"]) == Decimal("25.375")


def test_to_json_handles_plain_values() -> None:
    text = objects.to_json({"amount": Decimal("1.10"), "day": date(2024, 1, 2)})

    assert json.loads(text) == {"amount": "1.10", "day": "2024-01-02"}


def test_deserialize_keeps_unparseable_date_text(valid_invoice, table) -> None:
    payload = serialize_invoice(valid_invoice)
    payload["due_date"] = "next week"

    invoice = deserialize_invoice(payload)

    assert invoice.due_date == "next week"
    assert serialize_invoice(invoice)["due_date"] == "next week"
    error = validate(invoice, table).errors["due_date"]
    assert error.kind is ErrorKind.INVALID_RANGE
    assert error.message == "Not a valid date."
