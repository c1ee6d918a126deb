from __future__ import annotations

from datetime import date

import pytest

from invoice_builder.models import Invoice, LineItem, LineItemCollection, TaxRateTable
from invoice_builder.services import get_tax_rate_table


@pytest.fixture
def table() -> TaxRateTable:
    return TaxRateTable(
        {"CA": "0.0725", "NY": "0.04", "OR": "0"},
        {"CA": "California", "NY": "New York"},
        name="test",
    )


@pytest.fixture
def valid_invoice() -> Invoice:
    return Invoice(
        invoice_number="INV-1234",
        from_name="Acme Studio",
        from_address="123 Main St, Anytown, USA",
        to_name="Client Co",
        to_address="456 Client Ave, Otherville, USA",
        invoice_date=date(2024, 3, 1),
        due_date=date(2024, 3, 31),
        items=LineItemCollection(
            [
                LineItem(description="Design", quantity=2, price="150.00"),
                LineItem(description="Hosting", quantity=1, price="50.00"),
            ]
        ),
    )


@pytest.fixture(autouse=True)
def _fresh_table_cache(monkeypatch):
    monkeypatch.delenv("INVOICE_BUILDER_TAX_TABLE", raising=False)
    monkeypatch.delenv("INVOICE_BUILDER_TAX_TABLE_PATH", raising=False)
    get_tax_rate_table.cache_clear()
    yield
    get_tax_rate_table.cache_clear()
