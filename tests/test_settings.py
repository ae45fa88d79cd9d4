import pytest
from pydantic import ValidationError

from pairswap.settings.config import (
    FACTORY_ADDRESSES,
    ROUTER_ADDRESSES,
    Settings,
    get_exchange_config,
)


def test_get_exchange_config_by_name_and_chain_id():
    by_name = get_exchange_config(" Sepolia ")
    by_chain = get_exchange_config(11155111)

    assert by_name is by_chain
    assert by_name.is_testnet
    assert get_exchange_config(8453).name == "base"


def test_get_exchange_config_unknown():
    assert get_exchange_config("fantom") is None
    assert get_exchange_config(999) is None
    assert get_exchange_config(None) is None


def test_address_tables_cover_every_network():
    assert set(ROUTER_ADDRESSES) == set(FACTORY_ADDRESSES) == {"ethereum", "sepolia", "base", "arbitrum", "polygon"}
    assert ROUTER_ADDRESSES["ethereum"] == "0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D"


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("SWAP_NETWORK", "arbitrum")
    monkeypatch.setenv("DEFAULT_SLIPPAGE_BPS", "30")
    monkeypatch.setenv("SWAP_QUOTE_SOURCE", "router")

    config = Settings()

    assert config.swap_network == "arbitrum"
    assert config.default_slippage_bps == 30
    assert config.swap_quote_source == "router"


def test_settings_ignore_comment_only_values(monkeypatch):
    monkeypatch.setenv("DEFAULT_MAX_DELAY_SECONDS", "  # unset")

    assert Settings().default_max_delay_seconds == 120


@pytest.mark.parametrize(
    "name, value",
    [("DEFAULT_SLIPPAGE_BPS", "10001"), ("SWAP_QUOTE_SOURCE", "oracle"), ("RECEIPT_TIMEOUT_SECONDS", "0")],
)
def test_settings_reject_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        Settings()
