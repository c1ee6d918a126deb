"""
Totals derivation.

compute_totals() is a pure function of the line items and the selected
jurisdiction. Callers invoke it after every edit; nothing is observed or
cached behind their back. It never raises: a row with a missing or
half-typed quantity or price simply contributes zero, so live totals can
always be shown mid-edit. Amounts too large to represent come back as
Infinity or NaN rather than raising.
"""

from decimal import Decimal, localcontext
from typing import Any, Iterable, Mapping

from invoice_builder.lib import logs
from invoice_builder.models.invoice import DEFAULT_CURRENCY, Totals
from invoice_builder.models.tax import TaxRateTable, normalize_key
from invoice_builder.services import get_tax_rate_table
from invoice_builder.utils import MONEY_CONTEXT, ZERO, coerce_decimal

LOG = logs.logger(__file__)


def compute_totals(
    items: Iterable[Any],
    jurisdiction: str | None = None,
    table: TaxRateTable | None = None,
    currency: str = DEFAULT_CURRENCY,
) -> Totals:
    """
    Derive subtotal, tax and total.

    Args:
        items: Line items, or mappings with ``quantity`` and ``price`` keys.
        jurisdiction: Optional tax jurisdiction key.
        table: Rate table to look the jurisdiction up in; defaults to the
            configured table.
        currency: Currency code used by the display helpers.

    Returns:
        Totals at full Decimal precision.
    """
    tax_rate = ZERO
    if normalize_key(jurisdiction) is not None:
        if table is None:
            table = get_tax_rate_table()
        tax_rate = table.lookup(jurisdiction)
    with localcontext(MONEY_CONTEXT):
        subtotal = sum((_line_total(item) for item in items), ZERO)
        tax_amount = subtotal * tax_rate
        total = subtotal + tax_amount
    totals = Totals(
        subtotal=subtotal,
        tax_rate=tax_rate,
        tax_amount=tax_amount,
        total=total,
        currency=currency,
    )
    LOG.debug(
        "compute_totals - jurisdiction:%s subtotal:%s tax:%s total:%s",
        jurisdiction,
        totals.subtotal,
        totals.tax_amount,
        totals.total,
    )
    return totals


def _line_total(item: Any) -> Decimal:
    if isinstance(item, Mapping):
        quantity, price = item.get("quantity"), item.get("price")
    else:
        quantity = getattr(item, "quantity", None)
        price = getattr(item, "price", None)
    return coerce_decimal(quantity) * coerce_decimal(price)
