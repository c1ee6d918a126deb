"""
Data models for the invoice builder.

This package provides:
- Invoice draft and line item models (Invoice, LineItem, LineItemCollection)
- Derived and validated models (Totals, ValidatedInvoice, ValidatedLineItem)
- The tax rate lookup table (TaxRateTable)
- The error taxonomy (ErrorKind, FieldError, IndexOutOfRange,
  InvoiceValidationError)
- Serialization/deserialization of drafts

All models use Python dataclasses.
"""

from invoice_builder.models.errors import (
    ErrorKind,
    FieldError,
    IndexOutOfRange,
    InvoiceValidationError,
)
from invoice_builder.models.invoice import (
    Invoice,
    Totals,
    ValidatedInvoice,
    ValidatedLineItem,
    deserialize_invoice,
    serialize_invoice,
)
from invoice_builder.models.line_items import LineItem, LineItemCollection
from invoice_builder.models.tax import TaxRateTable

__all__ = [
    "ErrorKind",
    "FieldError",
    "IndexOutOfRange",
    "Invoice",
    "InvoiceValidationError",
    "LineItem",
    "LineItemCollection",
    "TaxRateTable",
    "Totals",
    "ValidatedInvoice",
    "ValidatedLineItem",
    "deserialize_invoice",
    "serialize_invoice",
]
