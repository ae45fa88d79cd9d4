"""Quote engine: derive router swap parameters from on-chain pair state.

Every call reads decimals, pair ordering, reserves and the latest block fresh;
nothing is cached between quotes because reserves change with every trade.
"""

from __future__ import annotations

from pairswap.clients.v2swap.abis import UNISWAP_V2_ROUTER_ABI
from pairswap.clients.v2swap.amounts import parse_units
from pairswap.clients.v2swap.erc20 import ERC20
from pairswap.clients.v2swap.pool import PairReader, PoolMathError, get_amount_in, get_amount_out, price_impact_pct
from pairswap.clients.v2swap.slippage import calculate_max_in, calculate_min_out
from pairswap.exceptions import ChainClientError, PoolUnavailable
from pairswap.logging import log
from pairswap.models.chain import ExchangeConfig
from pairswap.models.swap import SwapIntent, SwapParams, TokenRef
from pairswap.settings.config import QuoteSource


class QuoteEngine:
    """Read-only derivation of ``SwapParams`` for a direct pair swap."""

    def __init__(self, chain, exchange: ExchangeConfig, quote_source: QuoteSource = "reserves") -> None:
        if quote_source not in ("reserves", "router"):
            raise ValueError(f"Unsupported quote_source={quote_source!r}")
        self.chain = chain
        self.exchange = exchange
        self.quote_source = quote_source
        self.pairs = PairReader(chain, exchange.factory)
        self.router = chain.contract(exchange.router, UNISWAP_V2_ROUTER_ABI)

    def resolve_token(self, token: TokenRef) -> TokenRef:
        if token.decimals is not None:
            return token
        return token.resolved(ERC20(self.chain, token.address).decimals())

    def _router_quote(self, exact_amount: int, exact_input: bool, path: list[str]) -> int:
        method = "getAmountsOut" if exact_input else "getAmountsIn"
        try:
            amounts = self.chain.call(self.router, method, exact_amount, path)
        except ChainClientError as exc:
            raise PoolUnavailable(f"Router {method} failed for path={path}: {exc}") from exc
        return int(amounts[-1] if exact_input else amounts[0])

    def _reserve_quote(self, exact_amount: int, exact_input: bool, reserve_in: int, reserve_out: int) -> int:
        try:
            if exact_input:
                return get_amount_out(exact_amount, reserve_in, reserve_out, self.exchange.fee_bps)
            return get_amount_in(exact_amount, reserve_in, reserve_out, self.exchange.fee_bps)
        except PoolMathError as exc:
            raise PoolUnavailable(f"Cannot quote against reserves in={reserve_in} out={reserve_out}: {exc}") from exc

    def derive_swap_params(self, intent: SwapIntent) -> SwapParams:
        input_token = self.resolve_token(intent.input_token)
        output_token = self.resolve_token(intent.output_token)
        exact_input = intent.exact_input
        exact_amount = parse_units(
            intent.trade.amount,
            input_token.decimals if exact_input else output_token.decimals,
        )
        path = [input_token.address, output_token.address]

        pool = self.pairs.read(input_token.address, output_token.address)
        reserve_in, reserve_out = pool.reserves_for(input_token.address)

        if self.quote_source == "router":
            expected = self._router_quote(exact_amount, exact_input, path)
        else:
            expected = self._reserve_quote(exact_amount, exact_input, reserve_in, reserve_out)

        if exact_input:
            amount_in = exact_amount
            amount_out = calculate_min_out(expected, intent.max_slippage_bps)
            traded_in, traded_out = exact_amount, expected
        else:
            amount_in = calculate_max_in(expected, intent.max_slippage_bps)
            amount_out = exact_amount
            traded_in, traded_out = expected, exact_amount

        impact = price_impact_pct(reserve_in, reserve_out, traded_in, traded_out, input_token.decimals)
        deadline = int(self.chain.latest_block()["timestamp"]) + intent.max_delay_seconds

        params = SwapParams(
            amount_in=amount_in,
            amount_out=amount_out,
            expected_amount=expected,
            expected_slippage=format(impact, "f") if impact is not None else None,
            path=(path[0], path[1]),
            deadline=deadline,
            exact_input=exact_input,
        )
        log.debug(
            f"Quoted {intent.trade.kind} pair={pool.pair_address} amount_in={params.amount_in} "
            f"amount_out={params.amount_out} expected={expected} impact_pct={params.expected_slippage} "
            f"deadline={deadline}"
        )
        return params
