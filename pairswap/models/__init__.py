"""
Data models for pair swaps.
"""
from pairswap.models.chain import EXCHANGE_CONFIGS, EXCHANGE_KEY_BY_CHAIN_ID, ExchangeConfig
from pairswap.models.swap import (
    DEFAULT_MAX_DELAY_SECONDS,
    DEFAULT_SLIPPAGE_BPS,
    ExactInput,
    ExactOutput,
    PoolState,
    SwapIntent,
    SwapParams,
    TokenRef,
    TradeAmount,
)

__all__ = [
    "DEFAULT_MAX_DELAY_SECONDS",
    "DEFAULT_SLIPPAGE_BPS",
    "EXCHANGE_CONFIGS",
    "EXCHANGE_KEY_BY_CHAIN_ID",
    "ExactInput",
    "ExactOutput",
    "ExchangeConfig",
    "PoolState",
    "SwapIntent",
    "SwapParams",
    "TokenRef",
    "TradeAmount",
]
