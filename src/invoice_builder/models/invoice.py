"""
Invoice domain models and serialization helpers.

The hierarchy is:

    Invoice (mutable draft being edited)
    ├── parties (from_name/from_address, to_name/to_address)
    ├── dates (invoice_date, due_date)
    ├── LineItemCollection[LineItem]
    └── tax_jurisdiction, notes

    ValidatedInvoice (frozen snapshot produced by validation)
    └── ValidatedLineItem[]

    Totals (derived from items and jurisdiction, never stored on the draft)

Serialization functions convert drafts to and from JSON-compatible
dictionaries for the Reflex state and for export.
"""

import os
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, localcontext
from typing import Any, Mapping

from benedict import benedict

from invoice_builder.models.line_items import LineItem, LineItemCollection
from invoice_builder.utils import (
    MONEY_CONTEXT,
    ZERO,
    format_currency,
    format_date,
    generate_invoice_number,
    is_blank,
    parse_date,
)

DEFAULT_CURRENCY = os.getenv("INVOICE_BUILDER_CURRENCY", "USD").upper()
DEFAULT_NOTES = os.getenv(
    "INVOICE_BUILDER_DEFAULT_NOTES", "Thank you for your business!"
)

HEADER_FIELDS = (
    "invoice_number",
    "from_name",
    "from_address",
    "to_name",
    "to_address",
    "invoice_date",
    "due_date",
    "notes",
)
DATE_FIELDS = ("invoice_date", "due_date")


def _default_items() -> LineItemCollection:
    return LineItemCollection([LineItem()])


@dataclass(slots=True)
class Invoice:
    """
    Invoice draft as edited by the user.

    Field values are raw: nothing here is checked until the draft is
    validated for submission.
    """

    invoice_number: str = field(default_factory=generate_invoice_number)
    from_name: str = ""
    from_address: str = ""
    to_name: str = ""
    to_address: str = ""
    invoice_date: date | str | None = field(default_factory=date.today)
    due_date: date | str | None = None
    items: LineItemCollection = field(default_factory=_default_items)
    tax_jurisdiction: str | None = None
    notes: str | None = DEFAULT_NOTES


@dataclass(frozen=True, slots=True)
class Totals:
    """
    Aggregated monetary data for an invoice.

    Amounts keep full precision; rounding to cents only happens in the
    display helpers.
    """

    subtotal: Decimal = ZERO
    tax_rate: Decimal = ZERO
    tax_amount: Decimal = ZERO
    total: Decimal = ZERO
    currency: str = DEFAULT_CURRENCY

    def as_money(self, value: Decimal) -> str:
        """Format the provided numeric value as currency."""
        return format_currency(value, self.currency)

    @property
    def subtotal_display(self) -> str:
        return self.as_money(self.subtotal)

    @property
    def tax_display(self) -> str:
        return self.as_money(self.tax_amount)

    @property
    def total_display(self) -> str:
        return self.as_money(self.total)

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dictionary."""
        return {
            "subtotal": str(self.subtotal),
            "tax_rate": str(self.tax_rate),
            "tax_amount": str(self.tax_amount),
            "total": str(self.total),
            "currency": self.currency,
        }


@dataclass(frozen=True, slots=True)
class ValidatedLineItem:
    """A line item whose quantity and price have been parsed and checked."""

    description: str
    quantity: Decimal
    price: Decimal

    @property
    def line_total(self) -> Decimal:
        with localcontext(MONEY_CONTEXT):
            return self.quantity * self.price

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "quantity": str(self.quantity),
            "price": str(self.price),
            "line_total": str(self.line_total),
        }


@dataclass(frozen=True, slots=True)
class ValidatedInvoice:
    """
    Immutable invoice snapshot that passed every field check.

    Safe to hand to export or formatting collaborators: text is trimmed,
    numbers are Decimals and both dates are present.
    """

    invoice_number: str
    from_name: str
    from_address: str
    to_name: str
    to_address: str
    invoice_date: date
    due_date: date
    items: tuple[ValidatedLineItem, ...]
    tax_jurisdiction: str | None = None
    notes: str | None = None

    def formatted_invoice_date(self) -> str:
        """Return the invoice date formatted for display."""
        return format_date(self.invoice_date)

    def formatted_due_date(self) -> str:
        """Return the due date formatted for display."""
        return format_date(self.due_date)

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dictionary."""
        return {
            "invoice_number": self.invoice_number,
            "invoice_date": self.invoice_date.isoformat(),
            "due_date": self.due_date.isoformat(),
            "from": {"name": self.from_name, "address": self.from_address},
            "to": {"name": self.to_name, "address": self.to_address},
            "items": [item.to_dict() for item in self.items],
            "tax_jurisdiction": self.tax_jurisdiction,
            "notes": self.notes,
        }


def serialize_invoice(invoice: Invoice) -> dict:
    """Convert an Invoice draft into a JSON serializable dictionary."""
    return {
        "invoice_number": invoice.invoice_number,
        "invoice_date": _iso(invoice.invoice_date),
        "due_date": _iso(invoice.due_date),
        "from": {"name": invoice.from_name, "address": invoice.from_address},
        "to": {"name": invoice.to_name, "address": invoice.to_address},
        "items": [item.to_dict() for item in invoice.items],
        "tax_jurisdiction": invoice.tax_jurisdiction,
        "notes": invoice.notes,
    }


def deserialize_invoice(payload: Mapping[str, Any]) -> Invoice:
    """
    Convert a dictionary structure back into an Invoice draft.

    Uses benedict keypaths so partially filled payloads (missing party
    blocks, null values) load as blank fields instead of raising KeyError.
    """
    b = benedict(dict(payload))
    items = b.get("items") or []
    return Invoice(
        invoice_number=b.get("invoice_number") or "",
        from_name=b.get("from.name") or "",
        from_address=b.get("from.address") or "",
        to_name=b.get("to.name") or "",
        to_address=b.get("to.address") or "",
        invoice_date=to_draft_date(b.get("invoice_date")),
        due_date=to_draft_date(b.get("due_date")),
        items=LineItemCollection(LineItem.from_dict(item) for item in items),
        tax_jurisdiction=b.get("tax_jurisdiction") or None,
        notes=b.get("notes"),
    )


def to_draft_date(value: Any) -> date | str | None:
    """
    Convert a typed date value for storage on a draft.

    Parseable values become dates and blank values become None. Anything
    else is kept as the trimmed text so validation can report it as an
    invalid date rather than a missing one.
    """
    if is_blank(value):
        return None
    parsed = parse_date(value if isinstance(value, date) else str(value))
    if parsed is None:
        return str(value).strip()
    return parsed


def _iso(value: date | str | None) -> str | None:
    if isinstance(value, date):
        return value.isoformat()
    return value or None
