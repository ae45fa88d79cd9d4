"""Swap planning structures and the balance/allowance/swap executor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pairswap.clients.v2swap.abis import UNISWAP_V2_ROUTER_ABI
from pairswap.clients.v2swap.erc20 import ERC20
from pairswap.clients.v2swap.quote import QuoteEngine
from pairswap.clients.v2swap.rpc import TxReceipt
from pairswap.exceptions import ChainClientError, InsufficientBalance, InvalidIntent, TransactionReverted
from pairswap.logging import log
from pairswap.models.chain import ExchangeConfig
from pairswap.models.swap import SwapIntent, SwapParams, checksum_address


@dataclass(frozen=True)
class SwapPlan:
    params: SwapParams
    recipient: str
    method: str
    args: tuple[Any, ...]

    @classmethod
    def from_params(cls, params: SwapParams, recipient: str) -> SwapPlan:
        path = list(params.path)
        if params.exact_input:
            method = "swapExactTokensForTokens"
            args = (params.amount_in, params.amount_out, path, recipient, params.deadline)
        else:
            method = "swapTokensForExactTokens"
            args = (params.amount_out, params.amount_in, path, recipient, params.deadline)
        return cls(params=params, recipient=recipient, method=method, args=args)


def confirm(pending, label: str) -> TxReceipt:
    """Block until ``pending`` is mined; a status-0 receipt raises ``TransactionReverted``."""
    receipt = pending.wait()
    if receipt.get("status") == 0:
        raise TransactionReverted(pending.tx_hash, receipt, f"{label} reverted hash={pending.tx_hash}")
    return receipt


class SwapExecutor:
    """Runs quote, balance check, optional approval and swap strictly in sequence."""

    def __init__(self, chain, exchange: ExchangeConfig, quote_engine: QuoteEngine | None = None) -> None:
        self.chain = chain
        self.exchange = exchange
        self.quote_engine = quote_engine or QuoteEngine(chain, exchange)
        self.router = chain.contract(exchange.router, UNISWAP_V2_ROUTER_ABI)

    def _check_network(self) -> None:
        chain_id = self.chain.chain_id
        if chain_id != self.exchange.chain_id:
            raise InvalidIntent(
                f"Signer is on chain_id={chain_id} but exchange {self.exchange.name} "
                f"is configured for chain_id={self.exchange.chain_id}"
            )

    def ensure_allowance(self, token: ERC20, owner: str, amount: int) -> str | None:
        """Approve exactly ``amount`` for the router when needed; returns the approval tx hash."""
        current = token.allowance(owner, self.router.address)
        if current >= amount:
            return None
        log.info(
            f"Allowance {current} below required {amount} for token={token.address}; "
            f"approving router={self.router.address}"
        )
        pending = token.approve(self.router.address, amount)
        log.bind(SWAP_EVENT=True).info(f"approve token={token.address} amount={amount} tx={pending.tx_hash}")
        confirm(pending, "approve")
        return pending.tx_hash

    def build_plan(self, intent: SwapIntent, recipient: str) -> SwapPlan:
        try:
            recipient = checksum_address(recipient)
        except ValueError as exc:
            raise InvalidIntent(f"Invalid recipient: {exc}") from exc
        self._check_network()
        params = self.quote_engine.derive_swap_params(intent)
        return SwapPlan.from_params(params, recipient)

    def execute_plan(self, plan: SwapPlan) -> TxReceipt:
        params = plan.params
        owner = self.chain.address
        token = ERC20(self.chain, params.path[0])

        balance = token.balance_of(owner)
        if balance < params.required_input:
            raise InsufficientBalance(token.address, balance, params.required_input)

        approval_hash = self.ensure_allowance(token, owner, params.required_input)
        try:
            pending = self.chain.transact(self.router, plan.method, *plan.args)
            log.bind(SWAP_EVENT=True).info(
                f"{plan.method} amount_in={params.amount_in} amount_out={params.amount_out} "
                f"path={list(params.path)} recipient={plan.recipient} deadline={params.deadline} "
                f"tx={pending.tx_hash}"
            )
            receipt = confirm(pending, plan.method)
        except ChainClientError as exc:
            if approval_hash:
                log.warning(f"Swap failed after approval tx={approval_hash} was mined; allowance stays raised: {exc}")
            raise

        explorer_url = self.exchange.explorer_tx_url(pending.tx_hash)
        log.info(f"Swap confirmed tx={pending.tx_hash} block={receipt.get('blockNumber')}")
        if explorer_url:
            log.info(f"Swap tx explorer url={explorer_url}")
        return receipt

    def execute(self, intent: SwapIntent, recipient: str) -> TxReceipt:
        return self.execute_plan(self.build_plan(intent, recipient))
