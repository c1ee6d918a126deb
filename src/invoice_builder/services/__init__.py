"""
Tax rate table factory for the invoice builder.

This module provides the get_tax_rate_table() factory function that returns
the TaxRateTable selected by configuration.

Available tables:
- us_states: Static US state base sales tax rates bundled with the package
- file: Rates loaded from the JSON file named by INVOICE_BUILDER_TAX_TABLE_PATH

The table is cached at the module level, so the same instance is reused for
the lifetime of the process. Configure via INVOICE_BUILDER_TAX_TABLE.
"""

import os
from functools import cache
from typing import Callable, Dict

from invoice_builder.data.us_states import STATE_TAX_RATES, US_STATES
from invoice_builder.lib import logs
from invoice_builder.models.tax import TaxRateTable

LOG = logs.logger(__file__)


def _us_states_table() -> TaxRateTable:
    return TaxRateTable(STATE_TAX_RATES, dict(US_STATES), name="us_states")


def _file_table() -> TaxRateTable:
    path = os.getenv("INVOICE_BUILDER_TAX_TABLE_PATH")
    if not path:
        raise ValueError("INVOICE_BUILDER_TAX_TABLE_PATH is not set")
    return TaxRateTable.from_json(path)


_TABLE_REGISTRY: Dict[str, Callable[[], TaxRateTable]] = {
    "us_states": _us_states_table,
    "file": _file_table,
}


@cache
def get_tax_rate_table(kind: str | None = None) -> TaxRateTable:
    """Return the configured tax rate table."""
    resolved_kind = (kind or os.getenv("INVOICE_BUILDER_TAX_TABLE", "us_states")).lower()
    try:
        factory = _TABLE_REGISTRY[resolved_kind]
    except KeyError as exc:
        msg = f"Unknown tax rate table kind: {resolved_kind}"
        raise ValueError(msg) from exc
    table = factory()
    LOG.info(
        "get_tax_rate_table - kind:%s resolved_kind:%s jurisdictions:%d",
        kind,
        resolved_kind,
        len(table),
    )
    return table
