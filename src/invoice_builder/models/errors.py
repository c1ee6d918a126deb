"""
Error taxonomy for invoice editing and submission.

Validation problems are user-facing and recoverable: they are collected as
FieldError values keyed by field path (``from_name``, ``items.2.price``) so
the presentation layer can annotate each offending control. Collection
edits that target a row that does not exist are programmer errors and
raise IndexOutOfRange instead.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping


class ErrorKind(str, Enum):
    """Categories of field-level validation failures."""

    REQUIRED_FIELD_MISSING = "RequiredFieldMissing"
    INVALID_RANGE = "InvalidRange"
    EMPTY_COLLECTION = "EmptyCollection"


@dataclass(frozen=True, slots=True)
class FieldError:
    """A single validation failure attached to a field path."""

    path: str
    kind: ErrorKind
    message: str

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dictionary."""
        return {"path": self.path, "kind": self.kind.value, "message": self.message}


class IndexOutOfRange(IndexError):
    """Raised when a line item edit targets a position outside the list."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"Line item index {index} out of range [0, {length})")
        self.index = index
        self.length = length


class InvoiceValidationError(ValueError):
    """Raised when a caller insists on a validated invoice that has errors."""

    def __init__(self, errors: Mapping[str, FieldError]) -> None:
        self.errors = dict(errors)
        paths = ", ".join(sorted(self.errors))
        super().__init__(f"Invoice has {len(self.errors)} invalid field(s): {paths}")

    @property
    def messages(self) -> dict[str, str]:
        """Field path to human-readable message."""
        return {path: error.message for path, error in self.errors.items()}
