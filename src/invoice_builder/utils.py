"""
Utility functions for invoice data manipulation and formatting.

Provides helpers for:
- Date parsing (multiple formats supported)
- Decimal parsing, strict for validation and lenient for live totals
- Currency and tax rate formatting
- Default invoice number generation
"""

import random
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation, localcontext
from typing import Any

ZERO = Decimal("0")
CENT = Decimal("0.01")

# Totals arithmetic on typed amounts: nothing traps, so a result outside the
# representable range comes back as Infinity or NaN.
MONEY_CONTEXT = Context(prec=28, traps=[])

_CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}


def parse_date(value: str | date | None) -> date | None:
    """
    Parse a date value into a calendar date.

    Args:
        value: A date/datetime, a string in m/d/y format (e.g., "12/25/2024")
            or ISO format, or None.

    Returns:
        date object if parsing succeeds, None otherwise
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value:
        value = value.strip()
    if not value:
        return None

    for fmt in ("%m/%d/%Y", "%m/%d/%y"):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            pass

    # Try ISO format as fallback (e.g., "2024-12-25" or "2024-12-25T10:00:00")
    try:
        return datetime.fromisoformat(value).date()
    except (ValueError, TypeError):
        pass

    return None


def is_blank(value: Any) -> bool:
    """Return True for None and for strings that are empty after trimming."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_decimal(value: Any) -> Decimal:
    """
    Strictly convert a raw input value to a finite Decimal.

    Floats go through ``str`` so 0.1 stays 0.1 rather than its binary
    expansion.

    Raises:
        ValueError: If the value is missing, not numeric, or not finite.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    else:
        text = str(value).strip()
        try:
            number = Decimal(text)
        except InvalidOperation as exc:
            raise ValueError(f"Not a number: {value!r}") from exc
    if not number.is_finite():
        raise ValueError(f"Not a number: {value!r}")
    return number


def coerce_decimal(value: Any, *, default: Decimal = ZERO) -> Decimal:
    """
    Convert the provided value to Decimal, returning ``default`` on failure.

    Used only for live totals, where a half-typed row must count as zero.
    """
    try:
        return parse_decimal(value)
    except ValueError:
        return default


def format_currency(value: Decimal | float, currency: str = "USD") -> str:
    """
    Format a currency amount for display, rounded half-up to cents.

    Args:
        value: Numeric amount to format.
        currency: Currency code (e.g., 'USD', 'EUR').

    Returns:
        Formatted string like '$1,234.56', or 'CHF 1,234.56' for codes
        without a known symbol. Infinite or NaN amounts format as 'N/A'.
    """
    if isinstance(value, Decimal) and not value.is_finite():
        return "N/A"
    amount = coerce_decimal(value)
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the cents
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
        sign = "-" if amount < 0 else ""
        digits = f"{abs(amount):,.2f}"
    symbol = _CURRENCY_SYMBOLS.get(currency.upper())
    if symbol:
        return f"{sign}{symbol}{digits}"
    return f"{sign}{currency.upper()} {digits}"


def format_rate(rate: Decimal) -> str:
    """Format a fractional tax rate as a percentage, e.g. 0.0725 -> '7.25%'."""
    percent = (rate * 100).quantize(CENT, rounding=ROUND_HALF_UP)
    return f"{percent}%"


def format_date(value: date | None) -> str:
    """Format a date for display, or the N/A label when missing."""
    if not value:
        return "N/A"
    return value.strftime("%b %d, %Y")


def generate_invoice_number(rng: random.Random | None = None) -> str:
    """Return a default invoice number of the form INV-NNNN."""
    rng = rng or random
    return f"INV-{rng.randint(1000, 9999)}"
