"""
Configuration management for pairswap.
"""
from __future__ import annotations

from pathlib import Path
from typing import ClassVar, Dict, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pairswap.models.chain import EXCHANGE_CONFIGS, EXCHANGE_KEY_BY_CHAIN_ID, ExchangeConfig
from pairswap.models.swap import DEFAULT_MAX_DELAY_SECONDS, DEFAULT_SLIPPAGE_BPS

PROJECT_ROOT = Path(__file__).resolve().parents[2]


env_file = Path(".env")
if env_file.exists():
    load_dotenv(env_file, override=False)  # Don't override existing env vars
else:
    load_dotenv(PROJECT_ROOT / ".env", override=False)

EXCHANGE_BY_CHAIN_ID: dict[int, str] = dict(EXCHANGE_KEY_BY_CHAIN_ID)
ROUTER_ADDRESSES: dict[str, str] = {name: config.router for name, config in EXCHANGE_CONFIGS.items()}
FACTORY_ADDRESSES: dict[str, str] = {name: config.factory for name, config in EXCHANGE_CONFIGS.items()}

QuoteSource = Literal["reserves", "router"]


def get_exchange_config(network: str | int | None) -> ExchangeConfig | None:
    """Return exchange configuration by network name or chain id."""
    if network is None:
        return None
    if isinstance(network, int):
        key = EXCHANGE_BY_CHAIN_ID.get(network)
        return EXCHANGE_CONFIGS.get(key) if key else None
    return EXCHANGE_CONFIGS.get(network.strip().lower())


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        extra="ignore",
        env_ignore_empty=True,
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
    )

    app_name: str = "pairswap"
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")

    EXCHANGE_CONFIGS: ClassVar[dict[str, ExchangeConfig]] = EXCHANGE_CONFIGS

    # Chain access
    rpc_url: Optional[str] = Field(default=None, validation_alias="RPC_URL")
    private_key: Optional[str] = Field(default=None, validation_alias="PRIVATE_KEY")
    receipt_timeout_seconds: float = Field(default=120.0, gt=0, validation_alias="RECEIPT_TIMEOUT_SECONDS")
    gas_priority_multiplier: float = Field(default=1.15, ge=1.0, validation_alias="GAS_PRIORITY_MULTIPLIER")

    # Exchange selection; unset network is inferred from the RPC chain id
    swap_network: Optional[str] = Field(default=None, validation_alias="SWAP_NETWORK")
    swap_router_address: Optional[str] = Field(default=None, validation_alias="SWAP_ROUTER_ADDRESS")
    swap_factory_address: Optional[str] = Field(default=None, validation_alias="SWAP_FACTORY_ADDRESS")
    swap_quote_source: QuoteSource = Field(default="reserves", validation_alias="SWAP_QUOTE_SOURCE")

    # Swap defaults
    default_slippage_bps: int = Field(
        default=DEFAULT_SLIPPAGE_BPS, ge=0, le=10_000, validation_alias="DEFAULT_SLIPPAGE_BPS"
    )
    default_max_delay_seconds: int = Field(
        default=DEFAULT_MAX_DELAY_SECONDS, gt=0, validation_alias="DEFAULT_MAX_DELAY_SECONDS"
    )

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str = Field(default="logs/pairswap.log", validation_alias="LOG_FILE")

    @model_validator(mode="before")
    @classmethod
    def _coerce_blank_env_entries(cls, data: Dict[str, object]):
        """Drop blank or comment-only overrides so they do not clobber defaults."""
        if not isinstance(data, dict):
            return data
        cleaned: Dict[str, object] = {}
        for key, value in data.items():
            if isinstance(value, str):
                value = value.split("#", 1)[0].strip() if "#" in value else value.strip()
                if not value:
                    continue
            cleaned[key] = value
        return cleaned


# Global settings instance
settings = Settings()
