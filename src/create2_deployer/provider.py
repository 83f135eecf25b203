"""JSON-RPC chain access for create2-deployer library."""

import itertools
import logging
import time
from typing import Any, Dict, List, Optional, Protocol

import requests
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

from .bytecode import hex_to_bytes
from .config import get_rpc_url
from .constants import DEFAULT_POLL_INTERVAL, DEFAULT_RECEIPT_TIMEOUT, DEFAULT_RPC_TIMEOUT
from .exceptions import ConfigurationError, RpcError, TransactionTimeoutError

logger = logging.getLogger(__name__)

# Transaction fields sent as JSON-RPC quantities
_QUANTITY_FIELDS = ("value", "gas", "gasPrice", "nonce", "chainId")


class Provider(Protocol):
    """Minimal chain access needed to predict, check and perform deployments."""

    def get_code(self, address: str) -> bytes:
        ...

    def call(self, address: str, data: bytes) -> bytes:
        ...

    def get_transaction_count(self, address: str) -> int:
        ...

    def send_transaction(
        self, tx: Dict[str, Any], account: Optional[LocalAccount] = None
    ) -> Dict[str, Any]:
        """Send a transaction and block until it is mined. Returns the receipt."""
        ...


def _to_rpc_transaction(tx: Dict[str, Any]) -> Dict[str, Any]:
    rpc_tx: Dict[str, Any] = {}
    for key, value in tx.items():
        if value is None:
            continue
        if key in _QUANTITY_FIELDS:
            rpc_tx[key] = hex(value)
        elif key == "data":
            rpc_tx[key] = "0x" + hex_to_bytes(value, "data").hex()
        else:
            rpc_tx[key] = value
    return rpc_tx


class JsonRpcProvider:
    """Provider talking JSON-RPC 2.0 over HTTP."""

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        timeout: float = DEFAULT_RPC_TIMEOUT,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        """
        Initialize the provider.

        Args:
            rpc_url: RPC endpoint URL (defaults to $ETH_RPC_URL)
            timeout: Per-request HTTP timeout in seconds
            receipt_timeout: How long send_transaction waits for a receipt
            poll_interval: Delay between receipt polls

        Raises:
            ConfigurationError: If no RPC URL is available
        """
        self.rpc_url = get_rpc_url(rpc_url)
        self.timeout = timeout
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval
        self._ids = itertools.count(1)

    def request(self, method: str, params: List[Any]) -> Any:
        """
        Perform a JSON-RPC call and return its result.

        Raises:
            RpcError: On HTTP errors, network errors or JSON-RPC error responses
        """
        request_id = next(self._ids)
        logger.debug("RPC request %d: %s", request_id, method)
        try:
            response = requests.post(
                self.rpc_url,
                json={"jsonrpc": "2.0", "method": method, "params": params, "id": request_id},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RpcError(f"Network error during RPC call {method}: {e}") from e

        if response.status_code != 200:
            raise RpcError(f"RPC request {method} failed with status {response.status_code}")

        try:
            result = response.json()
        except ValueError as e:
            raise RpcError(f"RPC response to {method} is not valid JSON") from e

        if "error" in result:
            raise RpcError(f"RPC error in {method}: {result['error']}")

        return result.get("result")

    def get_code(self, address: str) -> bytes:
        return hex_to_bytes(self.request("eth_getCode", [address, "latest"]), "code")

    def call(self, address: str, data: bytes) -> bytes:
        tx = _to_rpc_transaction({"to": address, "data": data})
        return hex_to_bytes(self.request("eth_call", [tx, "latest"]), "call result")

    def get_transaction_count(self, address: str, block: str = "pending") -> int:
        return int(self.request("eth_getTransactionCount", [address, block]), 16)

    def chain_id(self) -> int:
        return int(self.request("eth_chainId", []), 16)

    def gas_price(self) -> int:
        return int(self.request("eth_gasPrice", []), 16)

    def estimate_gas(self, tx: Dict[str, Any]) -> int:
        return int(self.request("eth_estimateGas", [_to_rpc_transaction(tx)]), 16)

    def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        return self.request("eth_getTransactionReceipt", [tx_hash])

    def send_raw_transaction(self, raw_tx: bytes) -> str:
        return self.request("eth_sendRawTransaction", ["0x" + bytes(raw_tx).hex()])

    def wait_for_receipt(self, tx_hash: str) -> Dict[str, Any]:
        """
        Poll for a transaction receipt until it is available.

        Raises:
            TransactionTimeoutError: If no receipt arrives within receipt_timeout
        """
        deadline = time.monotonic() + self.receipt_timeout
        while True:
            receipt = self.get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt
            if time.monotonic() >= deadline:
                raise TransactionTimeoutError(
                    f"Transaction {tx_hash} not mined after {self.receipt_timeout}s"
                )
            logger.debug("Waiting for receipt of %s", tx_hash)
            time.sleep(self.poll_interval)

    def send_transaction(
        self, tx: Dict[str, Any], account: Optional[LocalAccount] = None
    ) -> Dict[str, Any]:
        """
        Send a transaction and block until it is mined.

        With an account the transaction is completed (nonce, gas price, gas,
        chain ID), signed locally and sent raw. Without one it is sent with
        eth_sendTransaction and the node signs for tx["from"].

        Args:
            tx: Transaction fields ("to", "data", "value", ...); omit "to" to create a contract
            account: Local signer

        Returns:
            Raw JSON-RPC receipt

        Raises:
            ConfigurationError: If neither account nor tx["from"] is given
            RpcError: If the node rejects the transaction (e.g. gas estimation reverts)
            TransactionTimeoutError: If the receipt does not arrive in time
        """
        if account is None:
            if not tx.get("from"):
                raise ConfigurationError("Transaction needs a 'from' address or a signing account")
            tx_hash = self.request("eth_sendTransaction", [_to_rpc_transaction(tx)])
        else:
            tx_hash = self.send_raw_transaction(self._sign(tx, account))

        logger.debug("Sent transaction %s", tx_hash)
        return self.wait_for_receipt(tx_hash)

    def _sign(self, tx: Dict[str, Any], account: LocalAccount) -> bytes:
        unsigned = {key: value for key, value in tx.items() if key != "from"}
        unsigned.setdefault("value", 0)
        unsigned["data"] = "0x" + hex_to_bytes(unsigned.get("data", b""), "data").hex()
        if unsigned.get("to"):
            unsigned["to"] = to_checksum_address(unsigned["to"])
        else:
            unsigned.pop("to", None)

        if "nonce" not in unsigned:
            unsigned["nonce"] = self.get_transaction_count(account.address)
        if "gasPrice" not in unsigned:
            unsigned["gasPrice"] = self.gas_price()
        if "chainId" not in unsigned:
            unsigned["chainId"] = self.chain_id()
        if "gas" not in unsigned:
            unsigned["gas"] = self.estimate_gas({**unsigned, "from": account.address})

        signed = account.sign_transaction(unsigned)
        return signed.raw_transaction
