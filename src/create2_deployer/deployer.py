"""Main API for create2-deployer library."""

import logging
from typing import Iterable, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from .addresses import compute_create2_address, compute_create_address, normalize_address
from .bytecode import ArgLike, HexOrBytes, build_init_code
from .config import FactoryConfig
from .constants import DEPLOYER_ADDRESS, FACTORY_ADDRESS
from .events import parse_deployed_address
from .exceptions import (
    AddressMismatchError,
    ConfigurationError,
    DeploymentFailedError,
    FactoryAddressMismatchError,
    RpcError,
    TransactionTimeoutError,
)
from .gateway import FactoryGateway, receipt_succeeded
from .provider import Provider
from .salts import SaltLike, normalize_salt
from .types import DeploymentResult

logger = logging.getLogger(__name__)


class Create2Deployer:
    """Predicts and performs CREATE2 deployments through a factory contract."""

    def __init__(
        self,
        provider: Optional[Provider] = None,
        config: Optional[FactoryConfig] = None,
        account: Optional[LocalAccount] = None,
        sender: Optional[str] = None,
    ):
        """
        Initialize the deployer.

        Args:
            provider: Chain access (only needed for on-chain operations)
            config: Factory deployment to use (defaults to FactoryConfig.default())
            account: Local signer for deployment transactions
            sender: From address when the node signs (used if account is None)
        """
        self.provider = provider
        self.config = config if config is not None else FactoryConfig.default()
        self.account = account
        self.sender = sender

    def _require_provider(self) -> Provider:
        if self.provider is None:
            raise ConfigurationError("A provider is required for on-chain operations")
        return self.provider

    def get_create2_address(
        self,
        salt: SaltLike,
        contract_bytecode: HexOrBytes,
        constructor_args: Iterable[ArgLike] = (),
    ) -> str:
        """
        Calculate the CREATE2 address of a contract locally.

        Args:
            salt: Salt (int, str, bytes or Salt)
            contract_bytecode: Creation bytecode
            constructor_args: ConstructorArg or (type, value) pairs in declaration order

        Returns:
            Lower-cased address the contract will be deployed at

        Raises:
            InvalidSaltError: If the salt cannot be normalized
            EncodingError: If constructor arguments cannot be encoded
        """
        init_code = build_init_code(contract_bytecode, constructor_args)
        return compute_create2_address(self.config.address, normalize_salt(salt), init_code)

    def is_deployed(self, address: str) -> bool:
        """
        Check if a contract is deployed at the given address.

        Returns:
            True if the address has code, False otherwise
        """
        code = self._require_provider().get_code(normalize_address(address))
        return len(code) > 0

    def factory_deployed(self) -> bool:
        """Check if the configured factory has code on the connected chain."""
        return self.is_deployed(self.config.address)

    def deploy_contract(
        self,
        salt: SaltLike,
        contract_bytecode: HexOrBytes,
        constructor_args: Iterable[ArgLike] = (),
    ) -> DeploymentResult:
        """
        Deploy a contract through the factory and verify its address.

        Args:
            salt: Salt (int, str, bytes or Salt)
            contract_bytecode: Creation bytecode
            constructor_args: ConstructorArg or (type, value) pairs in declaration order

        Returns:
            DeploymentResult with the transaction hash, address and receipt

        Raises:
            InvalidSaltError: If the salt cannot be normalized
            EncodingError: If constructor arguments cannot be encoded
            DeploymentFailedError: If the transaction reverts (e.g. salt already used)
            EventNotFoundError: If the receipt lacks the Deployed event
            AddressMismatchError: If the event address differs from the prediction
        """
        salt_bytes = normalize_salt(salt)
        init_code = build_init_code(contract_bytecode, constructor_args)
        predicted = compute_create2_address(self.config.address, salt_bytes, init_code)
        logger.info("Deploying contract to %s with salt 0x%s", predicted, salt_bytes.hex())

        gateway = FactoryGateway(self._require_provider(), self.config, self.account, self.sender)
        receipt = gateway.deploy(init_code, salt_bytes)

        actual = parse_deployed_address(
            receipt, self.config.abi, self.config.event_name, emitter=self.config.address
        )
        if actual != predicted:
            raise AddressMismatchError(predicted, actual)

        logger.info("Contract deployed at %s", actual)
        return DeploymentResult(
            transaction_hash=receipt.get("transactionHash"),
            address=actual,
            receipt=receipt,
        )

    def deploy_factory(self, account: Optional[LocalAccount] = None) -> str:
        """
        Deploy the factory contract itself.

        Args:
            account: Bootstrap signer (defaults to the configured deployer key)

        Returns:
            Factory address
        """
        if account is None:
            account = Account.from_key(self.config.require_deployer_key())
        return deploy_factory_with_account(self._require_provider(), account, self.config)

    def ensure_factory(self) -> bool:
        """
        Deploy the factory unless it already has code.

        Returns:
            True if the factory was deployed by this call, False if it already existed
        """
        if self.factory_deployed():
            return False
        logger.warning("Factory not found at %s, deploying it", self.config.address)
        self.deploy_factory()
        return True


def get_create2_address(
    salt: SaltLike,
    contract_bytecode: HexOrBytes,
    constructor_args: Iterable[ArgLike] = (),
    config: Optional[FactoryConfig] = None,
) -> str:
    """
    Calculate the CREATE2 address of a contract locally.

    See Create2Deployer.get_create2_address.
    """
    return Create2Deployer(config=config).get_create2_address(salt, contract_bytecode, constructor_args)


def is_deployed(address: str, provider: Provider) -> bool:
    """Check if a contract is deployed at the given address."""
    return Create2Deployer(provider).is_deployed(address)


def deploy_contract(
    salt: SaltLike,
    contract_bytecode: HexOrBytes,
    provider: Provider,
    constructor_args: Iterable[ArgLike] = (),
    account: Optional[LocalAccount] = None,
    sender: Optional[str] = None,
    config: Optional[FactoryConfig] = None,
) -> DeploymentResult:
    """
    Deploy a contract using the CREATE2 factory.

    See Create2Deployer.deploy_contract.
    """
    deployer = Create2Deployer(provider, config, account, sender)
    return deployer.deploy_contract(salt, contract_bytecode, constructor_args)


def deploy_factory_with_account(
    provider: Provider,
    account: LocalAccount,
    config: Optional[FactoryConfig] = None,
) -> str:
    """
    Deploy the factory contract with an ordinary contract-creation transaction.

    The factory address depends only on the account and its nonce, so the
    prediction is checked before anything is sent.

    Args:
        provider: Chain access
        account: Funded signer (normally the bootstrap deployer key)
        config: Factory deployment to create (defaults to FactoryConfig.default())

    Returns:
        Lower-cased factory address

    Raises:
        FactoryAddressMismatchError: If the account cannot or did not deploy to config.address
        DeploymentFailedError: If the creation transaction is rejected or reverts
    """
    if config is None:
        config = FactoryConfig.default()

    if config.address == FACTORY_ADDRESS and account.address.lower() != DEPLOYER_ADDRESS:
        raise FactoryAddressMismatchError(
            config.address,
            compute_create_address(account.address, 0),
            f"The default factory can only be deployed by {DEPLOYER_ADDRESS}, not {account.address}",
        )

    nonce = provider.get_transaction_count(account.address)
    predicted = compute_create_address(account.address, nonce)
    if predicted != config.address:
        raise FactoryAddressMismatchError(
            config.address,
            predicted,
            f"Account {account.address} at nonce {nonce} would deploy the factory to "
            f"{predicted}, expected {config.address}",
        )

    logger.info("Deploying factory to %s from %s", config.address, account.address)
    try:
        receipt = provider.send_transaction({"data": config.bytecode, "value": 0}, account)
    except TransactionTimeoutError:
        raise
    except RpcError as e:
        raise DeploymentFailedError(f"Factory deployment rejected: {e}") from e

    if not receipt_succeeded(receipt):
        raise DeploymentFailedError(
            f"Factory deployment transaction {receipt.get('transactionHash')} reverted"
        )
    if not receipt.get("contractAddress"):
        raise DeploymentFailedError(
            f"Receipt of {receipt.get('transactionHash')} has no contract address"
        )

    actual = normalize_address(receipt["contractAddress"])
    if actual != config.address:
        raise FactoryAddressMismatchError(config.address, actual)

    logger.info("Factory deployed at %s", actual)
    return actual


def deploy_factory(provider: Provider, config: Optional[FactoryConfig] = None) -> str:
    """
    Deploy the factory for local development using the bootstrap deployer key.

    The deployer address must be funded first.

    Raises:
        ConfigurationError: If no deployer key is configured
    """
    if config is None:
        config = FactoryConfig.default()
    account = Account.from_key(config.require_deployer_key())
    return deploy_factory_with_account(provider, account, config)
