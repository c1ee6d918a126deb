"""
Invoice Builder: the computation and validation engine behind an invoice form.

This package lets a caller assemble a billing document, keep live totals
while it is edited, and validate it before export.

Subpackages and modules:
- models: Invoice, line item, totals and tax table models
- services: Tax rate table factory
- data: Static US state tax rates
- totals: Pure subtotal/tax/total derivation
- validation: Submission checks producing a ValidatedInvoice or field errors
- draft: InvoiceDraft editing session
- state: Reflex state wrapping an editing session
"""

from invoice_builder.draft import InvoiceDraft
from invoice_builder.models import (
    ErrorKind,
    FieldError,
    IndexOutOfRange,
    Invoice,
    InvoiceValidationError,
    LineItem,
    LineItemCollection,
    TaxRateTable,
    Totals,
    ValidatedInvoice,
    ValidatedLineItem,
)
from invoice_builder.services import get_tax_rate_table
from invoice_builder.totals import compute_totals
from invoice_builder.validation import ValidationResult, validate

__all__ = [
    "ErrorKind",
    "FieldError",
    "IndexOutOfRange",
    "Invoice",
    "InvoiceDraft",
    "InvoiceValidationError",
    "LineItem",
    "LineItemCollection",
    "TaxRateTable",
    "Totals",
    "ValidatedInvoice",
    "ValidatedLineItem",
    "ValidationResult",
    "__version__",
    "compute_totals",
    "get_tax_rate_table",
    "validate",
]

__version__ = "0.1.0"
