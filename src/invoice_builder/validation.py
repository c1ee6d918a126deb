"""
Submission validation for invoice drafts.

validate() runs every field rule and collects all violations; no rule
short-circuits another. The result is either a ValidatedInvoice snapshot
with its Totals, or a mapping of field path to FieldError. Submission is
all-or-nothing.

Raw values are parsed strictly here. A quantity of "abc" is an error on
submit even though the live totals count it as zero.
"""

import os
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Callable

from invoice_builder.lib import logs
from invoice_builder.models.errors import ErrorKind, FieldError, InvoiceValidationError
from invoice_builder.models.invoice import (
    DEFAULT_CURRENCY,
    Invoice,
    Totals,
    ValidatedInvoice,
    ValidatedLineItem,
)
from invoice_builder.models.line_items import LineItem
from invoice_builder.models.tax import TaxRateTable, normalize_key
from invoice_builder.totals import compute_totals
from invoice_builder.utils import ZERO, is_blank, parse_date, parse_decimal

LOG = logs.logger(__file__)

STRICT_DUE_DATE = os.getenv("INVOICE_BUILDER_STRICT_DUE_DATE", "false").lower() in {
    "1",
    "true",
    "yes",
}

REQUIRED_TEXT_FIELDS: dict[str, str] = {
    "from_name": "Your name is required.",
    "from_address": "Your address is required.",
    "to_name": "Client's name is required.",
    "to_address": "Client's address is required.",
    "invoice_number": "Invoice number is required.",
}

REQUIRED_DATE_FIELDS: dict[str, str] = {
    "invoice_date": "Invoice date is required.",
    "due_date": "Due date is required.",
}


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of a submission attempt.

    Attributes:
        invoice: The validated snapshot, or None when there are errors.
        totals: Totals computed from the validated items, or None.
        errors: Field path to FieldError; empty on success.
    """

    invoice: ValidatedInvoice | None = None
    totals: Totals | None = None
    errors: dict[str, FieldError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True when the invoice passed every check."""
        return not self.errors

    @property
    def messages(self) -> dict[str, str]:
        """Field path to human-readable message, for inline display."""
        return {path: error.message for path, error in self.errors.items()}

    def unwrap(self) -> tuple[ValidatedInvoice, Totals]:
        """
        Return the validated invoice and its totals.

        Raises:
            InvoiceValidationError: If validation failed.
        """
        if self.errors:
            raise InvoiceValidationError(self.errors)
        return self.invoice, self.totals


def validate(
    invoice: Invoice,
    table: TaxRateTable | None = None,
    *,
    enforce_due_date_order: bool | None = None,
    currency: str = DEFAULT_CURRENCY,
) -> ValidationResult:
    """
    Check every field of the draft and build a ValidatedInvoice.

    Args:
        invoice: The draft to check. It is not modified.
        table: Rate table used for the totals; defaults to the configured one.
        enforce_due_date_order: Reject a due date before the invoice date.
            Defaults to INVOICE_BUILDER_STRICT_DUE_DATE.
        currency: Currency code carried on the resulting Totals.

    Returns:
        ValidationResult holding either the snapshot and totals or the errors.
    """
    if enforce_due_date_order is None:
        enforce_due_date_order = STRICT_DUE_DATE

    errors: dict[str, FieldError] = {}

    def fail(path: str, kind: ErrorKind, message: str) -> None:
        errors[path] = FieldError(path, kind, message)

    for name, message in REQUIRED_TEXT_FIELDS.items():
        if is_blank(getattr(invoice, name)):
            fail(name, ErrorKind.REQUIRED_FIELD_MISSING, message)

    dates: dict[str, date | None] = {}
    for name, message in REQUIRED_DATE_FIELDS.items():
        dates[name] = _check_date(name, getattr(invoice, name), message, fail)

    if (
        enforce_due_date_order
        and dates["invoice_date"]
        and dates["due_date"]
        and dates["due_date"] < dates["invoice_date"]
    ):
        fail(
            "due_date",
            ErrorKind.INVALID_RANGE,
            "Due date cannot be before the invoice date.",
        )

    if len(invoice.items) == 0:
        fail("items", ErrorKind.EMPTY_COLLECTION, "Please add at least one item.")

    validated_items = [
        _check_item(f"items.{index}", item, fail)
        for index, item in enumerate(invoice.items)
    ]

    if errors:
        LOG.debug("validate - %d error(s): %s", len(errors), sorted(errors))
        return ValidationResult(errors=errors)

    snapshot = ValidatedInvoice(
        invoice_number=invoice.invoice_number.strip(),
        from_name=invoice.from_name.strip(),
        from_address=invoice.from_address.strip(),
        to_name=invoice.to_name.strip(),
        to_address=invoice.to_address.strip(),
        invoice_date=dates["invoice_date"],
        due_date=dates["due_date"],
        items=tuple(validated_items),
        tax_jurisdiction=normalize_key(invoice.tax_jurisdiction),
        notes=invoice.notes,
    )
    totals = compute_totals(
        snapshot.items, snapshot.tax_jurisdiction, table, currency=currency
    )
    if not totals.total.is_finite():
        fail("items", ErrorKind.INVALID_RANGE, "Invoice total is too large.")
        LOG.debug("validate - total out of range: %s", totals.total)
        return ValidationResult(errors=errors)
    return ValidationResult(invoice=snapshot, totals=totals)


def _check_date(
    path: str,
    value: Any,
    message: str,
    fail: Callable[[str, ErrorKind, str], None],
) -> date | None:
    if is_blank(value):
        fail(path, ErrorKind.REQUIRED_FIELD_MISSING, message)
        return None
    parsed = parse_date(value)
    if parsed is None:
        fail(path, ErrorKind.INVALID_RANGE, "Not a valid date.")
    return parsed


def _check_item(
    path: str,
    item: LineItem,
    fail: Callable[[str, ErrorKind, str], None],
) -> ValidatedLineItem | None:
    valid = True
    if is_blank(item.description):
        fail(
            f"{path}.description",
            ErrorKind.REQUIRED_FIELD_MISSING,
            "Description is required.",
        )
        valid = False

    quantity = _check_number(
        f"{path}.quantity",
        item.quantity,
        lambda number: number > ZERO,
        "Quantity is required.",
        "Must be > 0.",
        fail,
    )
    price = _check_number(
        f"{path}.price",
        item.price,
        lambda number: number >= ZERO,
        "Price is required.",
        "Cannot be negative.",
        fail,
    )
    if not valid or quantity is None or price is None:
        return None
    return ValidatedLineItem(
        description=item.description.strip(), quantity=quantity, price=price
    )


def _check_number(
    path: str,
    value: Any,
    in_range: Callable[[Decimal], bool],
    missing_message: str,
    range_message: str,
    fail: Callable[[str, ErrorKind, str], None],
) -> Decimal | None:
    if is_blank(value):
        fail(path, ErrorKind.REQUIRED_FIELD_MISSING, missing_message)
        return None
    try:
        number = parse_decimal(value)
    except ValueError:
        fail(path, ErrorKind.INVALID_RANGE, "Must be a number.")
        return None
    if not in_range(number):
        fail(path, ErrorKind.INVALID_RANGE, range_message)
        return None
    return number
