#!/usr/bin/env python3
"""
Currency Conversion Utilities

All amounts are handled as integers to avoid floating-point errors.

Currency Systems:
- YNAB uses milliunits: 1000 milliunits = $1.00
- Internal calculations use cents (minor units): 100 cents = $1.00
- Retailer exports use dollar strings: "$12.34"
"""

from decimal import Decimal, InvalidOperation


def milliunits_to_cents(milliunits: int) -> int:
    """
    Convert YNAB milliunits to cents, preserving sign.

    Example:
        milliunits_to_cents(-45990) -> -4599
    """
    # int() truncates toward zero so -45995 stays -4599 rather than flooring to -4600
    return int(milliunits / 10)


def cents_to_dollars_str(cents: int) -> str:
    """
    Convert cents to a dollar string using integer arithmetic.

    Example:
        cents_to_dollars_str(-4599) -> "-45.99"
    """
    sign = "-" if cents < 0 else ""
    abs_cents = abs(int(cents))
    return f"{sign}{abs_cents // 100}.{abs_cents % 100:02d}"


def parse_dollars_to_cents(value: str | int | float) -> int:
    """
    Parse a dollar amount from a retailer export to cents.

    Args:
        value: Dollar string like '$1,234.56', '-12.5', or a number

    Returns:
        Amount in cents

    Raises:
        ValueError: If the value cannot be read as an amount
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a currency amount: {value!r}")
    if isinstance(value, int):
        return value * 100

    clean = str(value).replace("$", "").replace(",", "").strip()
    if not clean:
        raise ValueError("Empty currency amount")

    try:
        amount = Decimal(clean)
    except InvalidOperation as e:
        raise ValueError(f"Not a currency amount: {value!r}") from e

    if not amount.is_finite():
        raise ValueError(f"Not a currency amount: {value!r}")

    return int((amount * 100).quantize(Decimal("1")))


def format_cents(cents: int) -> str:
    """Format cents as dollar string with $ prefix."""
    return f"${cents_to_dollars_str(cents)}"
