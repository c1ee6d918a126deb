"""
Editing session for a single invoice.

InvoiceDraft owns one in-memory Invoice for the lifetime of an editing
session. The presentation layer calls its mutation methods for every user
edit and reads ``totals`` afterwards; totals are derived on each read from
the current items and jurisdiction. ``submit()`` validates the whole draft.
"""

from typing import Any

from invoice_builder.lib import logs
from invoice_builder.models.invoice import (
    DATE_FIELDS,
    DEFAULT_CURRENCY,
    HEADER_FIELDS,
    Invoice,
    Totals,
    serialize_invoice,
    to_draft_date,
)
from invoice_builder.models.line_items import LineItem
from invoice_builder.models.tax import TaxRateTable, normalize_key
from invoice_builder.services import get_tax_rate_table
from invoice_builder.totals import compute_totals
from invoice_builder.validation import ValidationResult, validate

LOG = logs.logger(__file__)


class InvoiceDraft:
    """
    Mutable invoice being edited, plus the collaborators it derives from.

    Attributes:
        invoice: The draft invoice.
        table: Tax rate table used for totals and the jurisdiction picker.
        currency: Currency code used to format totals.
    """

    def __init__(
        self,
        invoice: Invoice | None = None,
        table: TaxRateTable | None = None,
        currency: str | None = None,
    ) -> None:
        self.invoice = invoice if invoice is not None else Invoice()
        self.table = table if table is not None else get_tax_rate_table()
        self.currency = (currency or DEFAULT_CURRENCY).upper()

    @property
    def totals(self) -> Totals:
        """Totals for the current items and jurisdiction."""
        return compute_totals(
            self.invoice.items,
            self.invoice.tax_jurisdiction,
            self.table,
            currency=self.currency,
        )

    @property
    def tax_label(self) -> str:
        """Percentage shown beside the tax line, e.g. '7.25%' or '0%'."""
        return self.table.rate_label(self.invoice.tax_jurisdiction)

    def line_totals(self) -> dict[str, str]:
        """Formatted per-row totals keyed by row id."""
        totals = self.totals
        return {
            item.row_id: totals.as_money(item.line_total)
            for item in self.invoice.items
        }

    def jurisdictions(self) -> list[tuple[str, str]]:
        """Return (key, label) pairs available for tax selection."""
        return self.table.jurisdictions()

    def set_field(self, name: str, value: Any) -> None:
        """
        Set one header field of the invoice.

        Date fields accept date/datetime objects or strings in ISO or m/d/Y
        form. A blank value clears the date; any other unparseable text is
        kept as typed and reported as an invalid date on submit.

        Raises:
            ValueError: If name is not a header field.
        """
        if name not in HEADER_FIELDS:
            raise ValueError(f"Unknown invoice field: {name}")
        if name in DATE_FIELDS:
            value = to_draft_date(value)
        setattr(self.invoice, name, value)

    def set_jurisdiction(self, key: str | None) -> None:
        """Select a tax jurisdiction, or clear it with None or a blank key."""
        self.invoice.tax_jurisdiction = normalize_key(key)
        jurisdiction = self.invoice.tax_jurisdiction
        if jurisdiction is not None and jurisdiction not in self.table:
            LOG.warning("Unknown tax jurisdiction %r, tax rate is 0", key)

    def append_item(self, **values: Any) -> LineItem:
        """Add a default row at the end and return it."""
        return self.invoice.items.append(**values)

    def remove_item(self, row_id: str) -> LineItem:
        """Remove the row with the given id."""
        return self.invoice.items.remove(row_id)

    def remove_item_at(self, index: int) -> LineItem:
        """Remove the row at the given position."""
        return self.invoice.items.remove_at(index)

    def update_item(self, row_id: str, name: str, value: Any) -> LineItem:
        """Set one field of the row with the given id."""
        items = self.invoice.items
        return items.update_field(items.index_of(row_id), name, value)

    def submit(self, *, enforce_due_date_order: bool | None = None) -> ValidationResult:
        """Validate the whole draft and return the outcome."""
        result = validate(
            self.invoice,
            self.table,
            enforce_due_date_order=enforce_due_date_order,
            currency=self.currency,
        )
        if result.ok:
            LOG.info(
                "Invoice %s validated - items:%d total:%s",
                result.invoice.invoice_number,
                len(result.invoice.items),
                result.totals.total,
            )
        else:
            LOG.warning(
                "Invoice %s rejected - %d field error(s)",
                self.invoice.invoice_number,
                len(result.errors),
            )
        return result

    def to_dict(self) -> dict:
        """Serialize the draft invoice."""
        return serialize_invoice(self.invoice)
