"""Shared pytest fixtures for create2-deployer tests."""

import itertools
from typing import Any, Dict, List, Optional

import pytest
from eth_abi import decode
from eth_account import Account
from eth_account.signers.local import LocalAccount

from create2_deployer.addresses import compute_create2_address, compute_create_address
from create2_deployer.bytecode import hex_to_bytes
from create2_deployer.config import FactoryConfig
from create2_deployer.deployer import deploy_factory
from create2_deployer.exceptions import ConfigurationError, RpcError
from create2_deployer.factory_code import DEPLOY_SELECTOR, DEPLOYED_TOPIC, FACTORY_RUNTIME_CODE

BOOTSTRAP_KEY = "0x" + "11" * 32
SIGNER_KEY = "0x" + "22" * 32

# Runtime of the sample Account contract: returns storage slot 0 (the owner)
ACCOUNT_RUNTIME_CODE = bytes.fromhex("6000546000526020" "6000f3")

# Creation code of the sample Account contract, taking one address argument.
# The constructor copies the last 32 bytes of init code into slot 0 and
# returns the runtime that follows at offset 0x1a.
ACCOUNT_BYTECODE = (
    "0x"
    "6020602038036000"  # codecopy(0, codesize - 32, 32)
    "39"
    "6000516000"  # sstore(0, mload(0))
    "55"
    "600b80601a6000"  # codecopy(0, 0x1a, 0x0b)
    "39"
    "6000f3"  # return(0, 0x0b)
    + ACCOUNT_RUNTIME_CODE.hex()
)
OWNER = "0x303de46de694cc75a2f66da93ac86c6a6eee607e"


class FakeChain:
    """
    In-memory chain implementing the Provider protocol.

    Contract creation follows the CREATE rule, and calls to a contract whose
    code equals the factory runtime behave like the factory: CREATE2 the
    given code, revert if the address is taken, emit Deployed(address).
    """

    def __init__(self, factory_runtime: bytes):
        self.factory_runtime = factory_runtime
        self.codes: Dict[str, bytes] = {}
        self.nonces: Dict[str, int] = {}
        self.transactions: List[Dict[str, Any]] = []
        self.reject_next: Optional[str] = None
        self.emit_address: Optional[str] = None
        self._hashes = itertools.count(1)

    def get_code(self, address: str) -> bytes:
        return self.codes.get(address.lower(), b"")

    def call(self, address: str, data: bytes) -> bytes:
        return b""

    def get_transaction_count(self, address: str) -> int:
        return self.nonces.get(address.lower(), 0)

    def send_transaction(
        self, tx: Dict[str, Any], account: Optional[LocalAccount] = None
    ) -> Dict[str, Any]:
        if self.reject_next is not None:
            message, self.reject_next = self.reject_next, None
            raise RpcError(message)

        if account is not None:
            sender = account.address.lower()
        elif tx.get("from"):
            sender = tx["from"].lower()
        else:
            raise ConfigurationError("no sender")

        nonce = self.get_transaction_count(sender)
        self.nonces[sender] = nonce + 1
        self.transactions.append(dict(tx, sender=sender))

        receipt: Dict[str, Any] = {
            "transactionHash": "0x%064x" % next(self._hashes),
            "from": sender,
            "to": tx.get("to"),
            "status": "0x1",
            "contractAddress": None,
            "logs": [],
        }
        data = hex_to_bytes(tx.get("data", b""))

        if not tx.get("to"):
            address = compute_create_address(sender, nonce)
            # Creation code of the factory returns the factory runtime
            self.codes[address] = self.factory_runtime if data.endswith(self.factory_runtime) else data
            receipt["contractAddress"] = address
            return receipt

        target = tx["to"].lower()
        if self.codes.get(target) != self.factory_runtime:
            return receipt

        if data[:4] != DEPLOY_SELECTOR:
            receipt["status"] = "0x0"
            return receipt

        code, salt = decode(["bytes", "bytes32"], data[4:])
        address = compute_create2_address(target, salt, code)
        if address in self.codes:
            receipt["status"] = "0x0"
            return receipt

        self.codes[address] = code
        emitted = self.emit_address or address
        receipt["logs"].append(
            {
                "address": target,
                "topics": ["0x" + DEPLOYED_TOPIC.hex(), "0x" + "00" * 12 + emitted[2:]],
                "data": "0x",
            }
        )
        return receipt


@pytest.fixture
def bootstrap_account() -> LocalAccount:
    """Return the account that deploys the factory."""
    return Account.from_key(BOOTSTRAP_KEY)


@pytest.fixture
def signer() -> LocalAccount:
    """Return an ordinary account used to send deployments."""
    return Account.from_key(SIGNER_KEY)


@pytest.fixture
def factory_config(bootstrap_account: LocalAccount) -> FactoryConfig:
    """Return a factory configuration whose address matches the bootstrap account at nonce 0."""
    return FactoryConfig(
        address=compute_create_address(bootstrap_account.address, 0),
        deployer_key=BOOTSTRAP_KEY,
    )


@pytest.fixture
def chain() -> FakeChain:
    """Return an empty fake chain."""
    return FakeChain(FACTORY_RUNTIME_CODE)


@pytest.fixture
def chain_with_factory(chain: FakeChain, factory_config: FactoryConfig) -> FakeChain:
    """Return a fake chain with the factory already deployed."""
    deploy_factory(chain, factory_config)
    return chain


@pytest.fixture
def account_bytecode() -> str:
    """Return creation bytecode of the sample Account contract."""
    return ACCOUNT_BYTECODE


@pytest.fixture
def owner_args() -> List[Any]:
    """Return constructor arguments of the sample Account contract."""
    return [("address", OWNER)]


@pytest.fixture
def account_runtime_code() -> bytes:
    """Return runtime bytecode installed by the sample Account contract."""
    return ACCOUNT_RUNTIME_CODE
