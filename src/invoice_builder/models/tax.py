"""
Tax rate lookup table.

A TaxRateTable maps a jurisdiction key (a region code such as "CA") to a
fractional sales tax rate. The table is read-only once built; looking up a
key it does not know yields a zero rate rather than an error.
"""

import json
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from invoice_builder.utils import ZERO, format_rate, parse_decimal

_ONE = Decimal("1")


def normalize_key(key: str | None) -> str | None:
    """Return the canonical form of a jurisdiction key, or None when blank."""
    if key is None:
        return None
    key = str(key).strip().upper()
    return key or None


class TaxRateTable(Mapping[str, Decimal]):
    """
    Immutable mapping of jurisdiction key to tax rate.

    Rates must lie in [0, 1). Keys are trimmed and upper-cased on the way in
    and on lookup, so "ca" and " CA " resolve to the same entry.

    Attributes:
        name: Short identifier of the table's source, used in logs.
    """

    def __init__(
        self,
        rates: Mapping[str, Any],
        labels: Mapping[str, str] | None = None,
        name: str = "custom",
    ) -> None:
        """
        Build the table.

        Args:
            rates: Jurisdiction key to rate (Decimal, number or numeric string).
            labels: Optional display label per key; defaults to the key.
            name: Identifier of the table's source.

        Raises:
            ValueError: If a key is blank or a rate is not a number in [0, 1).
        """
        parsed: dict[str, Decimal] = {}
        for raw_key, raw_rate in rates.items():
            key = normalize_key(raw_key)
            if key is None:
                raise ValueError("Tax jurisdiction keys must not be blank")
            rate = parse_decimal(raw_rate)
            if not ZERO <= rate < _ONE:
                raise ValueError(f"Tax rate for {key} must be in [0, 1), got {rate}")
            parsed[key] = rate
        self._rates = MappingProxyType(parsed)
        label_map = {normalize_key(k): v for k, v in (labels or {}).items()}
        self._labels = MappingProxyType(
            {key: label_map.get(key) or key for key in parsed}
        )
        self.name = name

    def __getitem__(self, key: str) -> Decimal:
        return self._rates[normalize_key(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def __repr__(self) -> str:
        return f"TaxRateTable(name={self.name!r}, jurisdictions={len(self)})"

    def lookup(self, key: str | None) -> Decimal:
        """Return the rate for ``key``; absent, blank or unknown keys give 0."""
        normalized = normalize_key(key)
        if normalized is None:
            return ZERO
        return self._rates.get(normalized, ZERO)

    def label(self, key: str | None) -> str | None:
        """Return the display label for ``key`` or None when unknown."""
        normalized = normalize_key(key)
        if normalized is None:
            return None
        return self._labels.get(normalized)

    def rate_label(self, key: str | None) -> str:
        """
        Return the percentage shown beside the tax line.

        A selected jurisdiction shows its rate with two decimals ("7.25%");
        no selection shows "0%".
        """
        if normalize_key(key) is None:
            return "0%"
        return format_rate(self.lookup(key))

    def jurisdictions(self) -> list[tuple[str, str]]:
        """Return (key, label) pairs in table order, for a picker."""
        return list(self._labels.items())

    @classmethod
    def from_json(cls, path: str | Path) -> "TaxRateTable":
        """
        Load a table from a JSON file.

        Accepted shapes per key: a bare rate (``"CA": "0.0725"``) or an
        object with ``rate`` and optional ``label``. Rates given as JSON
        numbers are parsed through Decimal to keep them exact.
        """
        path = Path(path)
        payload = json.loads(path.read_text(encoding="utf-8"), parse_float=Decimal)
        if not isinstance(payload, dict):
            raise ValueError(f"Tax table {path} must contain a JSON object")
        rates: dict[str, Any] = {}
        labels: dict[str, str] = {}
        for key, entry in payload.items():
            if isinstance(entry, dict):
                if "rate" not in entry:
                    raise ValueError(f"Tax table entry {key!r} has no rate")
                rates[key] = entry["rate"]
                if entry.get("label"):
                    labels[key] = entry["label"]
            else:
                rates[key] = entry
        return cls(rates, labels, name=path.name)
