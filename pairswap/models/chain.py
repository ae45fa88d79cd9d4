"""Typed exchange/network models and default constant-product exchange registry."""

from __future__ import annotations

import re
from typing import Final
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

ADDRESS_REGEX: Final[re.Pattern[str]] = re.compile(r"^0x[a-fA-F0-9]{40}$")

UNISWAP_V2_FEE_BPS: Final[int] = 30


class ExchangeConfig(BaseModel):
    """Router/factory deployment of a Uniswap V2 style exchange on one network."""

    name: str
    chain_id: int
    router: str
    factory: str
    fee_bps: int = Field(default=UNISWAP_V2_FEE_BPS, ge=0, lt=10_000)
    explorer_base_url: str | None = None
    is_testnet: bool = False

    model_config = {
        "frozen": True,
    }

    @field_validator("router", "factory")
    @classmethod
    def validate_address(cls, value: str) -> str:
        if not ADDRESS_REGEX.match(value):
            raise ValueError(f"Invalid Ethereum address: {value}")
        return value

    @field_validator("explorer_base_url")
    @classmethod
    def validate_explorer_base_url(cls, value: str | None) -> str | None:
        if value is None:
            return value
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"Invalid explorer URL: {value}")
        return value.rstrip("/")

    def explorer_tx_url(self, tx_hash: str) -> str | None:
        if not self.explorer_base_url:
            return None
        return f"{self.explorer_base_url}/tx/{tx_hash}"


EXCHANGE_CONFIGS: dict[str, ExchangeConfig] = {
    "ethereum": ExchangeConfig(
        name="ethereum",
        chain_id=1,
        router="0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D",
        factory="0x5C69bEe701ef814a2B6a3EDD4B1652CB9cc5aA6f",
        explorer_base_url="https://etherscan.io",
    ),
    "sepolia": ExchangeConfig(
        name="sepolia",
        chain_id=11155111,
        router="0xeE567Fe1712Faf6149d80dA1E6934E354124CfE3",
        factory="0xF62c03E08ada871A0bEb309762E260a7a6a880E6",
        explorer_base_url="https://sepolia.etherscan.io",
        is_testnet=True,
    ),
    "base": ExchangeConfig(
        name="base",
        chain_id=8453,
        router="0x4752ba5DBc23f44D87826276BF6Fd6b1C372aD24",
        factory="0x8909Dc15e40173Ff4699343b6eB8132c65e18eC6",
        explorer_base_url="https://basescan.org",
    ),
    "arbitrum": ExchangeConfig(
        name="arbitrum",
        chain_id=42161,
        router="0x4752ba5DBc23f44D87826276BF6Fd6b1C372aD24",
        factory="0xf1D7CC64Fb4452F05c498126312eBE29f30Fbcf9",
        explorer_base_url="https://arbiscan.io",
    ),
    "polygon": ExchangeConfig(
        name="polygon",
        chain_id=137,
        router="0xedf6066a2b290C185783862C7F4776A2C8077AD1",
        factory="0x9e5A52f57b3038F1B8EeE45F28b3C1967e22799C",
        explorer_base_url="https://polygonscan.com",
    ),
}

EXCHANGE_KEY_BY_CHAIN_ID: dict[int, str] = {config.chain_id: key for key, config in EXCHANGE_CONFIGS.items()}
