"""Slippage utilities."""

from __future__ import annotations

from pairswap.exceptions import InvalidIntent

BPS_DENOMINATOR = 10_000


class SlippageError(InvalidIntent):
    """Raised when invalid slippage values are supplied."""


def _validate(expected: int, slippage_bps: int) -> None:
    if expected < 0:
        raise SlippageError("expected amount must be non-negative")
    if slippage_bps < 0 or slippage_bps > BPS_DENOMINATOR:
        raise SlippageError("slippage_bps must be in [0, 10000]")


def slippage_amount(expected: int, slippage_bps: int) -> int:
    """Truncated slippage allowance; truncation always tightens the bound."""
    _validate(expected, slippage_bps)
    return expected * slippage_bps // BPS_DENOMINATOR


def calculate_min_out(expected_out: int, slippage_bps: int) -> int:
    """Return minimum acceptable output amount using basis-points slippage."""
    return expected_out - slippage_amount(expected_out, slippage_bps)


def calculate_max_in(expected_in: int, slippage_bps: int) -> int:
    """Return maximum acceptable input amount using basis-points slippage."""
    return expected_in + slippage_amount(expected_in, slippage_bps)
