"""Chain client: web3 provider, signer and transaction lifecycle with normalized errors."""

from __future__ import annotations

from typing import Any

from eth_account import Account
from web3 import Web3

from pairswap.clients.v2swap.gas import GasManager
from pairswap.exceptions import ChainClientError
from pairswap.logging import log
from pairswap.settings.config import settings

TxReceipt = dict[str, Any]


class PendingTransaction:
    """A broadcast transaction that has not been confirmed yet."""

    def __init__(self, chain: ChainClient, tx_hash: str, label: str = "transaction") -> None:
        self.chain = chain
        self.tx_hash = tx_hash
        self.label = label

    def wait(self, timeout: float | None = None) -> TxReceipt:
        return self.chain.wait_for_receipt(self.tx_hash, timeout=timeout)

    def __repr__(self) -> str:
        return f"PendingTransaction(label={self.label!r}, tx_hash={self.tx_hash!r})"


class ChainClient:
    """Thin wrapper around a web3 provider and a local signing account."""

    def __init__(
        self,
        url: str | None = None,
        private_key: str | None = None,
        w3: Web3 | None = None,
        receipt_timeout_seconds: float | None = None,
        gas_multiplier: float | None = None,
    ) -> None:
        if w3 is None:
            resolved_url = url or settings.rpc_url
            if not resolved_url:
                raise ChainClientError("Missing RPC URL: provide url or set RPC_URL in .env")
            w3 = Web3(Web3.HTTPProvider(resolved_url))
            if not w3.is_connected():
                raise ChainClientError(f"RPC connection failed for url={resolved_url}")
        self.w3 = w3

        resolved_key = private_key or settings.private_key
        self.account = Account.from_key(resolved_key) if resolved_key else None
        self.receipt_timeout_seconds = receipt_timeout_seconds or settings.receipt_timeout_seconds
        self.gas = GasManager(w3, multiplier=gas_multiplier or settings.gas_priority_multiplier)

    @property
    def address(self) -> str:
        if self.account is None:
            raise ChainClientError("No signer configured: provide private_key or set PRIVATE_KEY in .env")
        return Web3.to_checksum_address(self.account.address)

    @property
    def chain_id(self) -> int:
        try:
            return int(self.w3.eth.chain_id)
        except Exception as exc:
            raise ChainClientError(f"Failed to fetch chain id: {exc}") from exc

    def contract(self, address: str, abi: list[dict[str, Any]]):
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    def call(self, contract, method: str, *args: Any) -> Any:
        try:
            return getattr(contract.functions, method)(*args).call()
        except Exception as exc:
            raise ChainClientError(f"{method} call failed on {contract.address}: {exc}") from exc

    def latest_block(self) -> dict[str, Any]:
        try:
            block = self.w3.eth.get_block("latest")
        except Exception as exc:
            raise ChainClientError(f"Failed to fetch latest block: {exc}") from exc
        return {"number": int(block["number"]), "timestamp": int(block["timestamp"])}

    def nonce(self, address: str) -> int:
        try:
            return int(self.w3.eth.get_transaction_count(address, "pending"))
        except Exception as exc:
            raise ChainClientError(f"Failed to fetch nonce for {address}: {exc}") from exc

    def transact(self, contract, method: str, *args: Any) -> PendingTransaction:
        """Build, sign and broadcast ``method(*args)``; confirmation is left to the caller."""
        sender = self.address
        try:
            tx = getattr(contract.functions, method)(*args).build_transaction(
                {
                    "from": sender,
                    "nonce": self.nonce(sender),
                    "value": 0,
                    "chainId": self.chain_id,
                }
            )
            gas_quote = self.gas.quote(int(tx["gas"]))
            has_gas = self.gas.has_balance_for_gas(sender, gas_quote)
        except ChainClientError:
            raise
        except Exception as exc:
            raise ChainClientError(f"Failed to build {method} transaction: {exc}") from exc

        if not has_gas:
            raise ChainClientError("Insufficient native token balance for gas")
        tx.pop("gasPrice", None)
        tx.update(gas_quote.to_tx_params())

        try:
            signed = self.w3.eth.account.sign_transaction(tx, private_key=self.account.key)
        except Exception as exc:
            raise ChainClientError(f"Failed to sign {method} transaction: {exc}") from exc
        raw_tx = getattr(signed, "raw_transaction", None) or getattr(signed, "rawTransaction", None)
        if raw_tx is None:
            raise ChainClientError("Signed transaction has no raw payload")
        tx_hash = self.send_raw(raw_tx)
        log.debug(f"Broadcasted {method} tx hash={tx_hash} nonce={tx['nonce']}")
        return PendingTransaction(self, tx_hash, label=method)

    def send_raw(self, raw_tx: bytes) -> str:
        try:
            return Web3.to_hex(self.w3.eth.send_raw_transaction(raw_tx))
        except Exception as exc:
            raise ChainClientError(f"Failed to send raw transaction: {exc}") from exc

    def wait_for_receipt(self, tx_hash: str, timeout: float | None = None) -> TxReceipt:
        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=timeout or self.receipt_timeout_seconds
            )
        except Exception as exc:
            raise ChainClientError(f"Failed waiting for receipt of {tx_hash}: {exc}") from exc
        return dict(receipt)
