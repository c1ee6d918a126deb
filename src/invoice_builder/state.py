"""
Reflex state for the invoice form.

This module holds the editing session as Reflex state: form values are
kept as the strings the inputs produce, rows carry their stable row_id, and
the totals are computed vars that rebuild an InvoiceDraft from the current
values on every change.

The event handlers delegate to the module-level helpers below, which work
on plain values and can be called without a running app.
"""

import dataclasses
from typing import Any, Mapping, Sequence

import reflex as rx

from invoice_builder.draft import InvoiceDraft
from invoice_builder.lib import logs, objects
from invoice_builder.models.invoice import (
    DEFAULT_NOTES,
    HEADER_FIELDS,
    Invoice,
    deserialize_invoice,
    serialize_invoice,
)
from invoice_builder.models.line_items import EDITABLE_FIELDS, LineItem
from invoice_builder.models.tax import TaxRateTable

LOG = logs.logger(__file__)

FORM_FIELDS = HEADER_FIELDS + ("tax_state",)

Row = dict[str, str]


@dataclasses.dataclass(frozen=True)
class Submission:
    """
    What the form keeps after a submit.

    Attributes:
        errors: Field path to message, for inline display.
        error_details: The same errors as path/kind/message dicts.
        submitted_json: Export of the validated invoice, its totals and
            their display strings; empty when there are errors.
    """

    errors: dict[str, str] = dataclasses.field(default_factory=dict)
    error_details: list[dict[str, str]] = dataclasses.field(default_factory=list)
    submitted_json: str = ""


def item_row(item: LineItem) -> Row:
    """Render a line item as the string row the form edits."""
    data = item.to_dict()
    return {key: "" if value is None else str(value) for key, value in data.items()}


def new_form() -> dict[str, Any]:
    """Form values for a fresh draft: number, today's date, notes and one row."""
    invoice = Invoice()
    payload = serialize_invoice(invoice)
    return {
        "invoice_number": payload["invoice_number"],
        "invoice_date": payload["invoice_date"] or "",
        "due_date": "",
        "notes": payload["notes"] or "",
        "rows": [item_row(item) for item in invoice.items],
    }


def form_draft(
    values: Mapping[str, Any],
    rows: Sequence[Mapping[str, Any]],
    table: TaxRateTable | None = None,
) -> InvoiceDraft:
    """Build a draft from form values; the tax_state value is the jurisdiction."""
    payload = {
        "invoice_number": values.get("invoice_number"),
        "invoice_date": values.get("invoice_date"),
        "due_date": values.get("due_date"),
        "from": {
            "name": values.get("from_name"),
            "address": values.get("from_address"),
        },
        "to": {"name": values.get("to_name"), "address": values.get("to_address")},
        "items": [dict(row) for row in rows],
        "tax_jurisdiction": values.get("tax_state"),
        "notes": values.get("notes"),
    }
    return InvoiceDraft(deserialize_invoice(payload), table)


def set_row_value(rows: Sequence[Row], row_id: str, name: str, value: str) -> list[Row]:
    """
    Return the rows with one field of the row with the given id replaced.

    Raises:
        ValueError: If name is not an editable line item field.
    """
    if name not in EDITABLE_FIELDS:
        raise ValueError(f"Unknown line item field: {name}")
    return [
        {**row, name: value} if row["row_id"] == row_id else dict(row)
        for row in rows
    ]


def remove_row(draft: InvoiceDraft, row_id: str) -> list[Row]:
    """
    Remove a row from the draft and return the remaining rows.

    Raises:
        KeyError: If no row has the given id.
    """
    try:
        draft.remove_item(row_id)
    except KeyError:
        LOG.warning("Unknown line item %r, nothing removed", row_id)
        raise
    return [item_row(item) for item in draft.invoice.items]


def submit_draft(draft: InvoiceDraft) -> Submission:
    """Validate the draft and return the errors or the exported snapshot."""
    result = draft.submit()
    if not result.ok:
        return Submission(
            errors=result.messages,
            error_details=[error.to_dict() for error in result.errors.values()],
        )
    invoice, totals = result.unwrap()
    display = {
        "invoice_date": invoice.formatted_invoice_date(),
        "due_date": invoice.formatted_due_date(),
        "subtotal": totals.subtotal_display,
        "tax": totals.tax_display,
        "total": totals.total_display,
    }
    return Submission(
        submitted_json=objects.to_json(
            {"invoice": invoice, "totals": totals, "display": display}, indent=2
        )
    )


class InvoiceFormState(rx.State):
    """
    Form state for a single invoice draft.

    Holds header values, line item rows, the selected tax state and the
    outcome of the last submit.
    """

    invoice_number: str = ""
    from_name: str = ""
    from_address: str = ""
    to_name: str = ""
    to_address: str = ""
    invoice_date: str = ""
    due_date: str = ""
    notes: str = DEFAULT_NOTES
    tax_state: str = ""
    rows: list[dict[str, str]] = []

    # Outcome of the last submit
    errors: dict[str, str] = {}
    error_details: list[dict[str, str]] = []
    submitted_json: str = ""

    @rx.var(cache=False)
    def subtotal_display(self) -> str:
        return self._draft().totals.subtotal_display

    @rx.var(cache=False)
    def tax_display(self) -> str:
        return self._draft().totals.tax_display

    @rx.var(cache=False)
    def tax_label(self) -> str:
        return self._draft().tax_label

    @rx.var(cache=False)
    def total_display(self) -> str:
        return self._draft().totals.total_display

    @rx.var(cache=False)
    def row_totals(self) -> dict[str, str]:
        """Formatted line total per row id."""
        return self._draft().line_totals()

    @rx.var(cache=False)
    def tax_options(self) -> list[list[str]]:
        """Jurisdiction [key, label] pairs for the tax picker."""
        return [[key, label] for key, label in self._draft().jurisdictions()]

    @rx.event
    def on_load(self):
        """Start a fresh draft with default values when the form opens."""
        if self.rows:
            return
        for name, value in new_form().items():
            setattr(self, name, value)
        LOG.info("New invoice draft %s", self.invoice_number)

    @rx.event
    def set_value(self, field: str, value: str):
        """Set one header field."""
        if field not in HEADER_FIELDS:
            raise ValueError(f"Unknown invoice field: {field}")
        setattr(self, field, value or "")

    @rx.event
    def select_tax_state(self, key: str):
        """Select the tax jurisdiction; an empty key clears it."""
        self.tax_state = key or ""

    @rx.event
    def add_item(self):
        """Append a default row."""
        self.rows = self.rows + [item_row(LineItem())]

    @rx.event
    def remove_item(self, row_id: str):
        """Remove the row with the given id."""
        self.rows = remove_row(self._draft(), row_id)

    @rx.event
    def set_item_value(self, row_id: str, field: str, value: str):
        """Set one field of the row with the given id."""
        self.rows = set_row_value(self.rows, row_id, field, value)

    @rx.event
    def submit(self):
        """Validate the draft; keep either the field errors or the snapshot."""
        outcome = submit_draft(self._draft())
        self.errors = outcome.errors
        self.error_details = outcome.error_details
        self.submitted_json = outcome.submitted_json

    def _draft(self) -> InvoiceDraft:
        values = {name: getattr(self, name) for name in FORM_FIELDS}
        return form_draft(values, self.rows)
