"""V2Swap client for direct constant-product pair swaps.

Exposes the two public operations: ``get_swap_params`` previews a trade from
current pair state, ``swap_tokens`` checks balance and allowance, approves the
router when needed and submits the swap.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from web3 import Web3

from pairswap.clients.v2swap.abis import UNISWAP_V2_ROUTER_ABI
from pairswap.clients.v2swap.quote import QuoteEngine
from pairswap.clients.v2swap.rpc import ChainClient, TxReceipt
from pairswap.clients.v2swap.swap import SwapExecutor
from pairswap.exceptions import V2SwapError
from pairswap.logging import log
from pairswap.models.chain import ExchangeConfig
from pairswap.models.swap import SwapIntent, SwapParams, TokenRef
from pairswap.settings.config import EXCHANGE_BY_CHAIN_ID, QuoteSource, get_exchange_config, settings

Amount = str | int | Decimal


class V2SwapClientError(V2SwapError):
    """Raised for V2Swap client configuration failures."""


def build_intent(
    input_token: TokenRef | str,
    output_token: TokenRef | str,
    amount: Amount,
    exact_input: bool,
    max_slippage_bps: int | None = None,
    max_delay_seconds: int | None = None,
    input_decimals: int | None = None,
    output_decimals: int | None = None,
) -> SwapIntent:
    """Validate a request into a ``SwapIntent``, filling unset limits from settings."""
    return SwapIntent.build(
        input_token,
        output_token,
        amount,
        exact_input,
        input_decimals=input_decimals,
        output_decimals=output_decimals,
        max_slippage_bps=settings.default_slippage_bps if max_slippage_bps is None else max_slippage_bps,
        max_delay_seconds=settings.default_max_delay_seconds if max_delay_seconds is None else max_delay_seconds,
    )


class V2SwapClient:
    """Uniswap V2 style router client bound to one chain and one exchange deployment."""

    def __init__(
        self,
        chain: ChainClient | None = None,
        network: str | None = None,
        router_address: str | None = None,
        factory_address: str | None = None,
        quote_source: QuoteSource | None = None,
        rpc_url: str | None = None,
        private_key: str | None = None,
    ) -> None:
        self.chain = chain or ChainClient(url=rpc_url, private_key=private_key)
        self.network = self._resolve_network(network)
        self.exchange = self._resolve_exchange(router_address, factory_address)
        log.info(
            f"Using exchange network={self.network} chain_id={self.exchange.chain_id} "
            f"router={self.exchange.router} factory={self.exchange.factory}"
        )

        self.quote_engine = QuoteEngine(
            self.chain,
            self.exchange,
            quote_source=quote_source or settings.swap_quote_source,
        )
        self.executor = SwapExecutor(self.chain, self.exchange, quote_engine=self.quote_engine)

    def _resolve_network(self, network: str | None) -> str:
        if network or settings.swap_network:
            return (network or settings.swap_network).strip().lower()
        chain_id = self.chain.chain_id
        inferred = EXCHANGE_BY_CHAIN_ID.get(chain_id)
        if inferred:
            log.info(f"Inferred network from chain_id chain_id={chain_id} network={inferred}")
            return inferred
        return f"chain-{chain_id}"

    def _resolve_exchange(self, router_address: str | None, factory_address: str | None) -> ExchangeConfig:
        router_address = router_address or settings.swap_router_address
        factory_address = factory_address or settings.swap_factory_address
        if router_address and not factory_address:
            factory_address = self._router_factory(router_address)
        base = get_exchange_config(self.network)
        if base is None:
            if not (router_address and factory_address):
                raise V2SwapClientError(
                    f"Unsupported network '{self.network}' and no router/factory addresses provided"
                )
            return ExchangeConfig(
                name=self.network,
                chain_id=self.chain.chain_id,
                router=router_address,
                factory=factory_address,
            )
        overrides: dict[str, Any] = {}
        if router_address:
            overrides["router"] = router_address
        if factory_address:
            overrides["factory"] = factory_address
        if not overrides:
            return base
        return ExchangeConfig.model_validate({**base.model_dump(), **overrides})

    def _router_factory(self, router_address: str) -> str:
        """Factory the router swaps through, so quotes read the same pairs."""
        router = self.chain.contract(router_address, UNISWAP_V2_ROUTER_ABI)
        factory_address = Web3.to_checksum_address(self.chain.call(router, "factory"))
        log.info(f"Resolved factory from router router={router_address} factory={factory_address}")
        return factory_address

    def get_swap_params(
        self,
        input_token: TokenRef | str,
        output_token: TokenRef | str,
        amount: Amount,
        exact_input: bool,
        max_slippage_bps: int | None = None,
        max_delay_seconds: int | None = None,
        *,
        input_decimals: int | None = None,
        output_decimals: int | None = None,
    ) -> SwapParams:
        intent = build_intent(
            input_token, output_token, amount, exact_input,
            max_slippage_bps, max_delay_seconds, input_decimals, output_decimals,
        )
        return self.quote_engine.derive_swap_params(intent)

    def swap_tokens(
        self,
        recipient: str,
        input_token: TokenRef | str,
        output_token: TokenRef | str,
        amount: Amount,
        exact_input: bool,
        max_slippage_bps: int | None = None,
        max_delay_seconds: int | None = None,
        *,
        input_decimals: int | None = None,
        output_decimals: int | None = None,
    ) -> TxReceipt:
        intent = build_intent(
            input_token, output_token, amount, exact_input,
            max_slippage_bps, max_delay_seconds, input_decimals, output_decimals,
        )
        return self.executor.execute(intent, recipient)

    def get_explorer_tx_url(self, tx_hash: str) -> str | None:
        return self.exchange.explorer_tx_url(tx_hash)


def get_swap_params(
    chain: ChainClient,
    input_token: TokenRef | str,
    output_token: TokenRef | str,
    amount: Amount,
    exact_input: bool,
    max_slippage_bps: int | None = None,
    max_delay_seconds: int | None = None,
    network: str | None = None,
) -> SwapParams:
    """Preview swap parameters for a direct pair on ``chain``."""
    intent = build_intent(input_token, output_token, amount, exact_input, max_slippage_bps, max_delay_seconds)
    client = V2SwapClient(chain=chain, network=network)
    return client.quote_engine.derive_swap_params(intent)


def swap_tokens(
    signer: ChainClient,
    recipient: str,
    input_token: TokenRef | str,
    output_token: TokenRef | str,
    amount: Amount,
    exact_input: bool,
    max_slippage_bps: int | None = None,
    max_delay_seconds: int | None = None,
    network: str | None = None,
) -> TxReceipt:
    """Swap through the exchange configured for ``signer``'s network and return the receipt."""
    intent = build_intent(input_token, output_token, amount, exact_input, max_slippage_bps, max_delay_seconds)
    client = V2SwapClient(chain=signer, network=network)
    return client.executor.execute(intent, recipient)
