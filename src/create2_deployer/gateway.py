"""Submission of deployments to the CREATE2 factory."""

import logging
from typing import Any, Dict, Optional

from eth_abi import encode
from eth_account.signers.local import LocalAccount

from .config import FactoryConfig
from .exceptions import DeploymentFailedError, InvalidInputLengthError, RpcError, TransactionTimeoutError
from .factory_code import DEPLOY_SELECTOR
from .provider import Provider
from .salts import SALT_SIZE

logger = logging.getLogger(__name__)


def encode_deploy_call(init_code: bytes, salt: bytes) -> bytes:
    """
    Build calldata for deploy(bytes,bytes32).

    Raises:
        InvalidInputLengthError: If salt is not 32 bytes
    """
    if len(salt) != SALT_SIZE:
        raise InvalidInputLengthError(f"Salt must be {SALT_SIZE} bytes, got {len(salt)}")
    return DEPLOY_SELECTOR + encode(["bytes", "bytes32"], [init_code, salt])


def receipt_succeeded(receipt: Dict[str, Any]) -> bool:
    status = receipt.get("status")
    if isinstance(status, str):
        status = int(status, 16)
    return status == 1


class FactoryGateway:
    """Sends deploy(code, salt) transactions to the factory contract."""

    def __init__(
        self,
        provider: Provider,
        config: FactoryConfig,
        account: Optional[LocalAccount] = None,
        sender: Optional[str] = None,
    ):
        """
        Args:
            provider: Chain access
            config: Factory deployment to call
            account: Local signer (if None, sender must be a node-managed account)
            sender: From address for node-signed transactions
        """
        self.provider = provider
        self.config = config
        self.account = account
        self.sender = sender

    def deploy(self, init_code: bytes, salt: bytes) -> Dict[str, Any]:
        """
        Deploy init code through the factory and wait for the receipt.

        Args:
            init_code: Creation bytecode with encoded constructor arguments
            salt: The exact 32-byte salt used for address prediction

        Returns:
            Raw JSON-RPC receipt of the mined transaction

        Raises:
            InvalidInputLengthError: If salt is not 32 bytes
            DeploymentFailedError: If the transaction is rejected or reverts,
                including when a contract already exists at the target address
            TransactionTimeoutError: If the receipt does not arrive in time
        """
        tx: Dict[str, Any] = {
            "to": self.config.address,
            "data": encode_deploy_call(init_code, salt),
            "value": 0,
        }
        if self.sender is not None:
            tx["from"] = self.sender

        try:
            receipt = self.provider.send_transaction(tx, self.account)
        except TransactionTimeoutError:
            raise
        except RpcError as e:
            raise DeploymentFailedError(
                f"Factory {self.config.address} rejected deployment with salt 0x{salt.hex()}: {e}"
            ) from e

        if not receipt_succeeded(receipt):
            raise DeploymentFailedError(
                f"Deployment transaction {receipt.get('transactionHash')} reverted "
                f"(salt 0x{salt.hex()} may already be used)"
            )

        logger.info("Deployment transaction %s mined", receipt.get("transactionHash"))
        return receipt
