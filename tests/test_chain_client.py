from __future__ import annotations

from types import SimpleNamespace

import pytest
from eth_account import Account
from web3.exceptions import Web3Exception

from pairswap.clients.v2swap.gas import DEFAULT_PRIORITY_FEE_WEI, GasManager
from pairswap.clients.v2swap.rpc import ChainClient, PendingTransaction
from pairswap.exceptions import ChainClientError
from tests.conftest import ROUTER

TEST_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


class FakeFunction:
    def __init__(self, contract: FakeContract, name: str, args: tuple) -> None:
        self.contract = contract
        self.name = name
        self.args = args

    def call(self):
        if self.name in self.contract.failures:
            raise self.contract.failures[self.name]
        return self.contract.results[self.name]

    def build_transaction(self, params: dict) -> dict:
        self.contract.built.append((self.name, self.args, dict(params)))
        return {**params, "to": self.contract.address, "data": "0xdeadbeef", "gas": 100_000, "gasPrice": 7}


class FakeContract:
    def __init__(self, address: str) -> None:
        self.address = address
        self.results: dict = {}
        self.failures: dict = {}
        self.built: list = []
        self.functions = self

    def __getattr__(self, name: str):
        return lambda *args: FakeFunction(self, name, args)


class FakeSigner:
    def __init__(self) -> None:
        self.signed: list[dict] = []
        self.failure: Exception | None = None

    def sign_transaction(self, tx: dict, private_key) -> SimpleNamespace:
        if self.failure is not None:
            raise self.failure
        self.signed.append(dict(tx))
        return SimpleNamespace(raw_transaction=b"\x02\xf8")


class FakeEth:
    def __init__(self, balance: int | Exception = 10**18, max_priority_fee: int | Exception = 2_000_000_000) -> None:
        self.chain_id = 1
        self.block_number = 100
        self.account = FakeSigner()
        self._balance = balance
        self._max_priority_fee = max_priority_fee
        self.sent: list[bytes] = []
        self.receipt = {"status": 1, "blockNumber": 101, "transactionHash": "0xabc"}

    @property
    def max_priority_fee(self) -> int:
        if isinstance(self._max_priority_fee, Exception):
            raise self._max_priority_fee
        return self._max_priority_fee

    def get_block(self, block_identifier):
        return {"number": 100, "timestamp": 1_700_000_000, "baseFeePerGas": 10_000_000_000}

    def get_transaction_count(self, address, block_identifier):
        return 7

    def get_balance(self, address):
        if isinstance(self._balance, Exception):
            raise self._balance
        return self._balance

    def send_raw_transaction(self, raw_tx: bytes) -> bytes:
        self.sent.append(raw_tx)
        return bytes.fromhex("ab" * 32)

    def wait_for_transaction_receipt(self, tx_hash, timeout):
        if isinstance(self.receipt, Exception):
            raise self.receipt
        return self.receipt


def _client(**eth_kwargs) -> ChainClient:
    return ChainClient(w3=SimpleNamespace(eth=FakeEth(**eth_kwargs)), private_key=TEST_KEY, gas_multiplier=1.25)


def test_address_is_derived_from_private_key():
    client = _client()

    assert client.address == Account.from_key(TEST_KEY).address


def test_address_without_signer_raises(monkeypatch):
    from pairswap.settings.config import settings

    monkeypatch.setattr(settings, "private_key", None)
    client = ChainClient(w3=SimpleNamespace(eth=FakeEth()))

    with pytest.raises(ChainClientError):
        client.address


def test_call_wraps_provider_errors_and_keeps_cause():
    client = _client()
    contract = FakeContract(ROUTER)
    boom = Web3Exception("execution reverted")
    contract.failures["getAmountsOut"] = boom

    with pytest.raises(ChainClientError) as excinfo:
        client.call(contract, "getAmountsOut", 1, [])

    assert excinfo.value.__cause__ is boom
    assert "getAmountsOut" in str(excinfo.value)


def test_call_returns_contract_result():
    client = _client()
    contract = FakeContract(ROUTER)
    contract.results["decimals"] = 6

    assert client.call(contract, "decimals") == 6


def test_latest_block_returns_number_and_timestamp():
    assert _client().latest_block() == {"number": 100, "timestamp": 1_700_000_000}


def test_transact_signs_eip1559_transaction_and_returns_pending():
    client = _client()
    contract = FakeContract(ROUTER)

    pending = client.transact(contract, "approve", ROUTER, 5)

    assert isinstance(pending, PendingTransaction)
    assert pending.tx_hash == "0x" + "ab" * 32
    assert pending.label == "approve"
    name, args, params = contract.built[0]
    assert (name, args) == ("approve", (ROUTER, 5))
    assert params == {"from": client.address, "nonce": 7, "value": 0, "chainId": 1}

    signed = client.w3.eth.account.signed[0]
    assert "gasPrice" not in signed
    assert signed["type"] == 2
    assert signed["gas"] == 125_000
    assert signed["maxPriorityFeePerGas"] == 2_500_000_000
    assert signed["maxFeePerGas"] == 15_000_000_000
    assert client.w3.eth.sent == [b"\x02\xf8"]


def test_transact_without_gas_balance_is_not_broadcast():
    client = _client(balance=0)

    with pytest.raises(ChainClientError, match="gas"):
        client.transact(FakeContract(ROUTER), "approve", ROUTER, 5)

    assert client.w3.eth.sent == []


def test_pending_transaction_waits_for_receipt():
    client = _client()

    receipt = PendingTransaction(client, "0xabc", "swap").wait()

    assert receipt["status"] == 1


def test_receipt_timeout_becomes_chain_client_error():
    client = _client()
    client.w3.eth.receipt = TimeoutError("not mined")

    with pytest.raises(ChainClientError):
        client.wait_for_receipt("0xabc")


def test_gas_quote_falls_back_when_priority_fee_unsupported():
    w3 = SimpleNamespace(eth=FakeEth(max_priority_fee=ValueError("method not found")))

    quote = GasManager(w3, multiplier=1.0).quote(21_000)

    assert quote.max_priority_fee_per_gas == DEFAULT_PRIORITY_FEE_WEI
    assert quote.max_fee_per_gas == 10_000_000_000 + DEFAULT_PRIORITY_FEE_WEI
    assert quote.gas == 21_000


def test_gas_balance_lookup_failure_becomes_chain_client_error():
    dropped = ConnectionError("node dropped")
    client = _client(balance=dropped)

    with pytest.raises(ChainClientError) as excinfo:
        client.transact(FakeContract(ROUTER), "approve", ROUTER, 5)

    assert excinfo.value.__cause__ is dropped
    assert client.w3.eth.sent == []


def test_signing_failure_becomes_chain_client_error():
    client = _client()
    bad_key = ValueError("invalid private key")
    client.w3.eth.account.failure = bad_key

    with pytest.raises(ChainClientError) as excinfo:
        client.transact(FakeContract(ROUTER), "swapExactTokensForTokens", 1, 0, [], ROUTER, 0)

    assert excinfo.value.__cause__ is bad_key
    assert client.w3.eth.sent == []
