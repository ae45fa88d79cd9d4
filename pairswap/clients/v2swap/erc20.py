"""ERC20 reads and approval helpers."""

from __future__ import annotations

from web3 import Web3

from pairswap.clients.v2swap.abis import ERC20_ABI


class ERC20:
    """Helper bound to one token contract through a chain client."""

    def __init__(self, chain, address: str) -> None:
        self.chain = chain
        self.address = Web3.to_checksum_address(address)
        self.contract = chain.contract(self.address, ERC20_ABI)

    def decimals(self) -> int:
        return int(self.chain.call(self.contract, "decimals"))

    def balance_of(self, owner: str) -> int:
        return int(self.chain.call(self.contract, "balanceOf", Web3.to_checksum_address(owner)))

    def allowance(self, owner: str, spender: str) -> int:
        return int(
            self.chain.call(
                self.contract,
                "allowance",
                Web3.to_checksum_address(owner),
                Web3.to_checksum_address(spender),
            )
        )

    def approve(self, spender: str, amount: int):
        """Submit ``approve(spender, amount)``; returns the pending transaction."""
        return self.chain.transact(self.contract, "approve", Web3.to_checksum_address(spender), int(amount))
