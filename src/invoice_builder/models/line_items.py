"""
Line items and the ordered collection that holds them on an invoice.

Rows keep whatever the user typed: quantity and price may be Decimals,
numbers, numeric strings, half-typed strings or None while editing.
Parsing happens later, leniently for live totals and strictly on submit.

Every row gets an opaque ``row_id`` when it is created. Positions shift
when a row is removed; the id does not, so callers use it for rendering
keys and to target removals.
"""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal, localcontext
from typing import Any, Iterable, Iterator, Mapping, Sequence

from invoice_builder.lib import logs
from invoice_builder.models.errors import IndexOutOfRange
from invoice_builder.utils import MONEY_CONTEXT, ZERO, coerce_decimal

LOG = logs.logger(__file__)

EDITABLE_FIELDS = ("description", "quantity", "price")


def new_row_id() -> str:
    """Return a fresh opaque row identifier."""
    return uuid.uuid4().hex


@dataclass(slots=True)
class LineItem:
    """One billable row: description, quantity and unit price."""

    description: str = ""
    quantity: Any = Decimal("1")
    price: Any = ZERO
    row_id: str = field(default_factory=new_row_id, compare=False)

    @property
    def line_total(self) -> Decimal:
        """Quantity times price, counting unparseable values as zero."""
        with localcontext(MONEY_CONTEXT):
            return coerce_decimal(self.quantity) * coerce_decimal(self.price)

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dictionary."""
        return {
            "row_id": self.row_id,
            "description": self.description,
            "quantity": _raw(self.quantity),
            "price": _raw(self.price),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LineItem":
        """Deserialize from dictionary, assigning a row id when none is given."""
        return cls(
            description=data.get("description") or "",
            quantity=data.get("quantity"),
            price=data.get("price"),
            row_id=data.get("row_id") or new_row_id(),
        )


class LineItemCollection(Sequence[LineItem]):
    """
    Ordered, mutable list of line items owned by one invoice.

    There is no minimum length while editing; an empty list is only
    rejected when the invoice is validated for submission.
    """

    def __init__(self, items: Iterable[LineItem] = ()) -> None:
        self._items: list[LineItem] = list(items)

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[LineItem]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LineItemCollection):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"LineItemCollection({self._items!r})"

    def append(self, item: LineItem | None = None, **values: Any) -> LineItem:
        """
        Add a row at the end and return it.

        Without arguments the row gets the defaults (empty description,
        quantity 1, price 0). Keyword values override individual fields.

        Raises:
            ValueError: If a keyword is not an editable field.
        """
        _check_fields(values)
        item = item or LineItem()
        for name, value in values.items():
            setattr(item, name, value)
        self._items.append(item)
        LOG.debug("Appended line item %s at %d", item.row_id, len(self._items) - 1)
        return item

    def remove_at(self, index: int) -> LineItem:
        """
        Remove the row at ``index``; later rows shift down by one.

        Raises:
            IndexOutOfRange: If index is outside [0, len).
        """
        self._check_index(index)
        item = self._items.pop(index)
        LOG.debug("Removed line item %s from %d", item.row_id, index)
        return item

    def remove(self, row_id: str) -> LineItem:
        """
        Remove the row with the given id.

        Raises:
            KeyError: If no row has that id.
        """
        return self.remove_at(self.index_of(row_id))

    def index_of(self, row_id: str) -> int:
        """
        Return the current position of the row with the given id.

        Raises:
            KeyError: If no row has that id.
        """
        for index, item in enumerate(self._items):
            if item.row_id == row_id:
                return index
        raise KeyError(row_id)

    def get(self, row_id: str) -> LineItem | None:
        """Return the row with the given id, or None."""
        return next((item for item in self._items if item.row_id == row_id), None)

    def update_field(self, index: int, name: str, value: Any) -> LineItem:
        """
        Set one editable field of the row at ``index``.

        Raises:
            IndexOutOfRange: If index is outside [0, len).
            ValueError: If name is not an editable field.
        """
        self._check_index(index)
        _check_fields({name: value})
        item = self._items[index]
        setattr(item, name, value)
        return item

    def row_ids(self) -> list[str]:
        """Return the row ids in display order."""
        return [item.row_id for item in self._items]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._items):
            raise IndexOutOfRange(index, len(self._items))


def _check_fields(values: Mapping[str, Any]) -> None:
    unknown = set(values) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown line item field(s): {', '.join(sorted(unknown))}")


def _raw(value: Any) -> Any:
    """Decimals become strings for JSON; everything else passes through."""
    if isinstance(value, Decimal):
        return str(value)
    return value


__all__ = [
    "EDITABLE_FIELDS",
    "LineItem",
    "LineItemCollection",
    "new_row_id",
]

