"""Conversion between human decimal amounts and smallest-unit token integers."""

from __future__ import annotations

from decimal import Decimal

from pairswap.exceptions import InvalidIntent
from pairswap.models.swap import AMOUNT_REGEX


def parse_units(amount: str | int | Decimal, decimals: int) -> int:
    """Scale a decimal amount to the token's smallest unit.

    Amounts are handled as digit strings so large values never pass through a
    rounding decimal context. Fractional digits beyond ``decimals`` are rejected
    rather than truncated; trailing zeros do not count.
    """
    if decimals < 0:
        raise InvalidIntent(f"decimals must be non-negative, got {decimals}")
    if isinstance(amount, bool) or isinstance(amount, float):
        raise InvalidIntent("amount must be a decimal string, int or Decimal")
    if isinstance(amount, Decimal):
        if not amount.is_finite():
            raise InvalidIntent(f"Invalid amount: {amount}")
        text = format(amount, "f")
    else:
        text = str(amount).strip()

    if not AMOUNT_REGEX.match(text):
        raise InvalidIntent(f"Invalid amount: {amount!r}")

    whole, _, fraction = text.partition(".")
    fraction = fraction.rstrip("0")
    if len(fraction) > decimals:
        raise InvalidIntent(
            f"Amount {text} has {len(fraction)} fractional digits; token supports {decimals}"
        )
    return int(whole or "0") * 10**decimals + int(fraction.ljust(decimals, "0") or "0")


def format_units(value: int, decimals: int) -> str:
    """Render a smallest-unit integer as a decimal string without trailing zeros."""
    value = int(value)
    sign = "-" if value < 0 else ""
    digits = str(abs(value))
    if decimals == 0:
        return f"{sign}{digits}"
    digits = digits.rjust(decimals + 1, "0")
    whole, fraction = digits[:-decimals], digits[-decimals:].rstrip("0")
    return f"{sign}{whole}.{fraction}" if fraction else f"{sign}{whole}"
