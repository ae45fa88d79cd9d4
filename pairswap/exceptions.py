"""Error taxonomy shared by the quote and swap layers."""

from __future__ import annotations

from typing import Any


class V2SwapError(Exception):
    """Base class for pair swap failures."""


class InvalidIntent(V2SwapError, ValueError):
    """Raised synchronously for a malformed or ambiguous swap request."""


class PoolUnavailable(V2SwapError):
    """Raised when the pair does not exist, is empty, or cannot be quoted."""


class InsufficientBalance(V2SwapError):
    """Raised before any transaction when the signer cannot cover the input amount."""

    def __init__(self, token: str, balance: int, required: int) -> None:
        super().__init__(f"Insufficient balance for token={token}: balance={balance} required={required}")
        self.token = token
        self.balance = balance
        self.required = required


class ChainClientError(V2SwapError):
    """Raised when an RPC read, signing, submission or confirmation fails."""


class TransactionReverted(ChainClientError):
    """
    Raised when a submitted transaction was mined with status == 0.
    Gas was paid and the chain executed and reverted it.
    """

    def __init__(self, tx_hash: str, receipt: dict[str, Any], msg: str | None = None) -> None:
        super().__init__(msg or f"Transaction reverted hash={tx_hash}")
        self.tx_hash = tx_hash
        self.receipt = receipt
