"""Constant-product pair reads and Uniswap V2 integer math."""

from __future__ import annotations

from decimal import Decimal, localcontext

from web3 import Web3

from pairswap.clients.v2swap.abis import UNISWAP_V2_FACTORY_ABI, UNISWAP_V2_PAIR_ABI
from pairswap.exceptions import ChainClientError, PoolUnavailable
from pairswap.logging import log
from pairswap.models.chain import UNISWAP_V2_FEE_BPS
from pairswap.models.swap import PoolState

FEE_DENOMINATOR = 10_000
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
IMPACT_PRECISION = 50


class PoolMathError(ValueError):
    """Raised when a trade cannot be priced against the given reserves."""


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int = UNISWAP_V2_FEE_BPS) -> int:
    """Output received for an exact input, matching ``UniswapV2Library.getAmountOut``."""
    if amount_in <= 0:
        raise PoolMathError("insufficient input amount")
    if reserve_in <= 0 or reserve_out <= 0:
        raise PoolMathError("insufficient liquidity")
    amount_in_with_fee = amount_in * (FEE_DENOMINATOR - fee_bps)
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * FEE_DENOMINATOR + amount_in_with_fee
    return numerator // denominator


def get_amount_in(amount_out: int, reserve_in: int, reserve_out: int, fee_bps: int = UNISWAP_V2_FEE_BPS) -> int:
    """Input required for an exact output, matching ``UniswapV2Library.getAmountIn``."""
    if amount_out <= 0:
        raise PoolMathError("insufficient output amount")
    if reserve_in <= 0 or reserve_out <= 0:
        raise PoolMathError("insufficient liquidity")
    if amount_out >= reserve_out:
        raise PoolMathError(f"requested output {amount_out} exceeds reserve {reserve_out}")
    numerator = reserve_in * amount_out * FEE_DENOMINATOR
    denominator = (reserve_out - amount_out) * (FEE_DENOMINATOR - fee_bps)
    return numerator // denominator + 1


def spot_price(reserve_in: int, reserve_out: int, input_decimals: int) -> int:
    """Output smallest units per one whole input token at the current reserves."""
    if reserve_in <= 0:
        raise PoolMathError("insufficient liquidity")
    return 10**input_decimals * reserve_out // reserve_in


def price_impact_pct(
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    amount_out: int,
    input_decimals: int,
) -> Decimal | None:
    """Relative change of the spot price caused by the trade, in percent.

    Negative when the trade makes the output token more expensive. Returns
    ``None`` when the pre-trade spot price rounds to zero.
    """
    pre = spot_price(reserve_in, reserve_out, input_decimals)
    if pre == 0:
        return None
    post = spot_price(reserve_in + amount_in, reserve_out - amount_out, input_decimals)
    with localcontext() as ctx:
        ctx.prec = IMPACT_PRECISION
        return (Decimal(post) - Decimal(pre)) / Decimal(pre) * 100


class PairReader:
    """Read-only pair lookup and reserve reads through the factory."""

    def __init__(self, chain, factory_address: str) -> None:
        self.chain = chain
        self.factory_address = Web3.to_checksum_address(factory_address)
        self.factory = chain.contract(self.factory_address, UNISWAP_V2_FACTORY_ABI)

    def pair_address(self, token_a: str, token_b: str) -> str:
        try:
            pair = self.chain.call(self.factory, "getPair", token_a, token_b)
        except ChainClientError as exc:
            raise PoolUnavailable(f"Pair lookup failed for {token_a}/{token_b}: {exc}") from exc
        if not pair or Web3.to_checksum_address(pair) == ZERO_ADDRESS:
            raise PoolUnavailable(f"No pair exists for {token_a}/{token_b} on factory {self.factory_address}")
        return Web3.to_checksum_address(pair)

    def read(self, token_in: str, token_out: str) -> PoolState:
        """Read ordering and reserves of the ``token_in``/``token_out`` pair."""
        pair_address = self.pair_address(token_in, token_out)
        pair = self.chain.contract(pair_address, UNISWAP_V2_PAIR_ABI)
        try:
            token0 = Web3.to_checksum_address(self.chain.call(pair, "token0"))
            reserve0, reserve1, _ = self.chain.call(pair, "getReserves")
        except ChainClientError as exc:
            raise PoolUnavailable(f"Reserve read failed for pair {pair_address}: {exc}") from exc

        token_in, token_out = Web3.to_checksum_address(token_in), Web3.to_checksum_address(token_out)
        if token0 == token_in:
            token1 = token_out
        elif token0 == token_out:
            token1 = token_in
        else:
            raise PoolUnavailable(f"Pair {pair_address} token0={token0} does not match {token_in}/{token_out}")

        pool = PoolState(
            pair_address=pair_address,
            token0=token0,
            token1=token1,
            reserve0=int(reserve0),
            reserve1=int(reserve1),
        )
        if pool.is_empty:
            raise PoolUnavailable(f"Pair {pair_address} has no liquidity")
        log.debug(
            f"Read pair={pair_address} token0={pool.token0} reserve0={pool.reserve0} "
            f"token1={pool.token1} reserve1={pool.reserve1}"
        )
        return pool
