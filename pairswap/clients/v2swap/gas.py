"""EIP-1559 fee parameters for approval and swap transactions."""

from __future__ import annotations

from dataclasses import dataclass

from web3 import Web3
from web3.exceptions import Web3Exception

DEFAULT_PRIORITY_FEE_WEI = 1_500_000_000


@dataclass(frozen=True)
class GasQuote:
    gas: int
    max_priority_fee_per_gas: int
    max_fee_per_gas: int

    def to_tx_params(self) -> dict[str, int]:
        return {
            "type": 2,
            "gas": self.gas,
            "maxFeePerGas": self.max_fee_per_gas,
            "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
        }

    @property
    def max_cost_wei(self) -> int:
        return self.gas * self.max_fee_per_gas


class GasManager:
    """Scales the node's gas estimate and fee suggestion by ``multiplier``."""

    def __init__(self, w3: Web3, multiplier: float = 1.15) -> None:
        self.w3 = w3
        self.multiplier = multiplier

    def _base_fee(self) -> int:
        latest = self.w3.eth.get_block("latest")
        return int(latest.get("baseFeePerGas") or 0)

    def _priority_fee(self) -> int:
        try:
            return int(self.w3.eth.max_priority_fee)
        except (ValueError, Web3Exception):
            # Node without eth_maxPriorityFeePerGas
            return DEFAULT_PRIORITY_FEE_WEI

    def quote(self, estimated_gas: int) -> GasQuote:
        """Pad ``estimated_gas`` and price the tip above the latest base fee."""
        tip = max(int(self._priority_fee() * self.multiplier), 1)
        fee_cap = int(self._base_fee() * self.multiplier + tip)
        return GasQuote(
            gas=int(int(estimated_gas) * self.multiplier),
            max_priority_fee_per_gas=tip,
            max_fee_per_gas=max(fee_cap, tip),
        )

    def has_balance_for_gas(self, sender: str, gas_quote: GasQuote) -> bool:
        return int(self.w3.eth.get_balance(sender)) >= gas_quote.max_cost_wei
