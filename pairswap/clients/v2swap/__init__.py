"""V2Swap client package."""

from pairswap.clients.v2swap.amounts import format_units, parse_units
from pairswap.clients.v2swap.client import (
    V2SwapClient,
    V2SwapClientError,
    build_intent,
    get_swap_params,
    swap_tokens,
)
from pairswap.clients.v2swap.quote import QuoteEngine
from pairswap.clients.v2swap.rpc import ChainClient, PendingTransaction, TxReceipt
from pairswap.clients.v2swap.swap import SwapExecutor, SwapPlan
from pairswap.exceptions import (
    ChainClientError,
    InsufficientBalance,
    InvalidIntent,
    PoolUnavailable,
    TransactionReverted,
    V2SwapError,
)
from pairswap.models.swap import ExactInput, ExactOutput, PoolState, SwapIntent, SwapParams, TokenRef
from pairswap.settings.config import EXCHANGE_CONFIGS, FACTORY_ADDRESSES, ROUTER_ADDRESSES, get_exchange_config

__all__ = [
    "EXCHANGE_CONFIGS",
    "FACTORY_ADDRESSES",
    "ROUTER_ADDRESSES",
    "ChainClient",
    "ChainClientError",
    "ExactInput",
    "ExactOutput",
    "InsufficientBalance",
    "InvalidIntent",
    "PendingTransaction",
    "PoolState",
    "PoolUnavailable",
    "QuoteEngine",
    "SwapExecutor",
    "SwapIntent",
    "SwapParams",
    "SwapPlan",
    "TokenRef",
    "TransactionReverted",
    "TxReceipt",
    "V2SwapClient",
    "V2SwapClientError",
    "V2SwapError",
    "build_intent",
    "format_units",
    "get_exchange_config",
    "get_swap_params",
    "parse_units",
    "swap_tokens",
]
