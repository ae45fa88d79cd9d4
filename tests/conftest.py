"""Test configuration and fixtures.

Provides an in-memory chain client that records every read and write so the
quote and swap flows can be exercised without a node. Pairs are stored the
way the factory orders them (token0 is the lower address).
"""

from __future__ import annotations

import os
from types import SimpleNamespace
from typing import Any

import pytest

# Keep host configuration out of the test run.
for _key in ("SWAP_NETWORK", "SWAP_ROUTER_ADDRESS", "SWAP_FACTORY_ADDRESS", "SWAP_QUOTE_SOURCE"):
    os.environ.pop(_key, None)

from pairswap.clients.v2swap.pool import ZERO_ADDRESS, get_amount_in, get_amount_out  # noqa: E402
from pairswap.exceptions import ChainClientError  # noqa: E402
from pairswap.models.chain import ExchangeConfig  # noqa: E402

USDC = "0x1111111111111111111111111111111111111111"
WETH = "0x2222222222222222222222222222222222222222"
PAIR = "0x3333333333333333333333333333333333333333"
ROUTER = "0x4444444444444444444444444444444444444444"
FACTORY = "0x5555555555555555555555555555555555555555"
SIGNER = "0x6666666666666666666666666666666666666666"
RECIPIENT = "0x7777777777777777777777777777777777777777"

BLOCK_TIMESTAMP = 1_700_000_000


class FakePending:
    def __init__(self, chain: FakeChain, tx_hash: str, label: str, on_confirm=None) -> None:
        self.chain = chain
        self.tx_hash = tx_hash
        self.label = label
        self._on_confirm = on_confirm

    def wait(self, timeout: float | None = None) -> dict[str, Any]:
        self.chain.events.append(("wait", self.label))
        if self.label in self.chain.wait_failures:
            raise self.chain.wait_failures[self.label]
        if self._on_confirm:
            self._on_confirm()
        status = self.chain.receipt_status.get(self.label, 1)
        return {"transactionHash": self.tx_hash, "status": status, "blockNumber": 101}


class FakeChain:
    """Chain client double exposing the same surface as ``ChainClient``."""

    def __init__(self, chain_id: int = 1, address: str = SIGNER, block_timestamp: int = BLOCK_TIMESTAMP) -> None:
        self.chain_id = chain_id
        self.address = address
        self.block_timestamp = block_timestamp
        self.fee_bps = 30
        self.tokens: dict[str, dict[str, Any]] = {}
        self.pairs: dict[frozenset[str], str] = {}
        self.pair_state: dict[str, dict[str, Any]] = {}
        self.router_quotes: dict[str, list[int]] = {}
        self.router_factory = FACTORY
        self.call_failures: dict[str, Exception] = {}
        self.wait_failures: dict[str, Exception] = {}
        self.receipt_status: dict[str, int] = {}
        self.reads: list[tuple[str, str, tuple[Any, ...]]] = []
        self.writes: list[tuple[str, str, tuple[Any, ...]]] = []
        self.events: list[tuple[str, str]] = []

    # setup helpers

    def add_token(self, address: str, decimals: int | None, balance: int = 0, allowance: int = 0) -> None:
        self.tokens[address] = {
            "decimals": decimals,
            "balances": {self.address: balance},
            "allowances": {(self.address, ROUTER): allowance},
        }

    def add_pair(self, token_a: str, token_b: str, reserve_a: int, reserve_b: int, pair: str = PAIR) -> None:
        if int(token_a, 16) < int(token_b, 16):
            token0, token1, reserve0, reserve1 = token_a, token_b, reserve_a, reserve_b
        else:
            token0, token1, reserve0, reserve1 = token_b, token_a, reserve_b, reserve_a
        self.pairs[frozenset((token_a, token_b))] = pair
        self.pair_state[pair] = {"token0": token0, "token1": token1, "reserve0": reserve0, "reserve1": reserve1}

    def _reserves(self, token_in: str, token_out: str) -> tuple[int, int]:
        state = self.pair_state[self.pairs[frozenset((token_in, token_out))]]
        if state["token0"] == token_in:
            return state["reserve0"], state["reserve1"]
        return state["reserve1"], state["reserve0"]

    # chain client surface

    def contract(self, address: str, abi: list[dict[str, Any]]):
        return SimpleNamespace(address=address, abi=abi)

    def call(self, contract, method: str, *args: Any) -> Any:
        self.reads.append((contract.address, method, args))
        if method in self.call_failures:
            raise self.call_failures[method]

        if method == "decimals":
            decimals = self.tokens[contract.address]["decimals"]
            if decimals is None:
                raise ChainClientError(f"decimals call failed on {contract.address}")
            return decimals
        if method == "balanceOf":
            return self.tokens[contract.address]["balances"].get(args[0], 0)
        if method == "allowance":
            return self.tokens[contract.address]["allowances"].get((args[0], args[1]), 0)
        if method == "factory":
            return self.router_factory
        if method == "getPair":
            return self.pairs.get(frozenset(args), ZERO_ADDRESS)
        if method in ("token0", "token1"):
            return self.pair_state[contract.address][method]
        if method == "getReserves":
            state = self.pair_state[contract.address]
            return state["reserve0"], state["reserve1"], self.block_timestamp
        if method in ("getAmountsOut", "getAmountsIn"):
            if method in self.router_quotes:
                return self.router_quotes[method]
            amount, path = args
            reserve_in, reserve_out = self._reserves(path[0], path[1])
            if method == "getAmountsOut":
                return [amount, get_amount_out(amount, reserve_in, reserve_out, self.fee_bps)]
            return [get_amount_in(amount, reserve_in, reserve_out, self.fee_bps), amount]
        raise AssertionError(f"Unexpected call {method} on {contract.address}")

    def transact(self, contract, method: str, *args: Any) -> FakePending:
        self.writes.append((contract.address, method, args))
        self.events.append(("transact", method))
        if method in self.call_failures:
            raise self.call_failures[method]
        on_confirm = None
        if method == "approve":
            spender, amount = args

            def on_confirm() -> None:
                self.tokens[contract.address]["allowances"][(self.address, spender)] = amount

        return FakePending(self, f"0x{len(self.writes):064x}", method, on_confirm)

    def latest_block(self) -> dict[str, Any]:
        self.reads.append(("latest", "getBlock", ()))
        return {"number": 100, "timestamp": self.block_timestamp}

    @property
    def write_methods(self) -> list[str]:
        return [method for _, method, _ in self.writes]


@pytest.fixture
def exchange() -> ExchangeConfig:
    return ExchangeConfig(name="testnet", chain_id=1, router=ROUTER, factory=FACTORY)


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def usdc_weth_chain(chain: FakeChain) -> FakeChain:
    """1,000,000 USDC (6 decimals) against 500 WETH (18 decimals)."""
    chain.add_token(USDC, decimals=6, balance=1_000 * 10**6)
    chain.add_token(WETH, decimals=18, balance=10 * 10**18)
    chain.add_pair(USDC, WETH, 1_000_000 * 10**6, 500 * 10**18)
    return chain
