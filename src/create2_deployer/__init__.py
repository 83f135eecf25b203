"""
create2-deployer: deterministic contract deployment through a CREATE2 factory
"""

from importlib.metadata import PackageNotFoundError, version

from .addresses import compute_create2_address, compute_create_address
from .bytecode import build_init_code
from .config import FactoryConfig
from .deployer import (
    Create2Deployer,
    deploy_contract,
    deploy_factory,
    deploy_factory_with_account,
    get_create2_address,
    is_deployed,
)
from .exceptions import (
    AddressMismatchError,
    ConfigurationError,
    Create2Error,
    DeploymentFailedError,
    EncodingError,
    EventNotFoundError,
    FactoryAddressMismatchError,
    InvalidInputLengthError,
    InvalidSaltError,
    RpcError,
    TransactionTimeoutError,
)
from .provider import JsonRpcProvider, Provider
from .salts import IntegerSalt, RawSalt, Salt, StringSalt, normalize_salt, salt_to_hex, to_salt
from .types import ConstructorArg, DeploymentResult

try:
    __version__ = version("create2-deployer")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "Create2Deployer",
    "FactoryConfig",
    "JsonRpcProvider",
    "Provider",
    "get_create2_address",
    "is_deployed",
    "deploy_contract",
    "deploy_factory",
    "deploy_factory_with_account",
    "compute_create2_address",
    "compute_create_address",
    "build_init_code",
    "Salt",
    "IntegerSalt",
    "RawSalt",
    "StringSalt",
    "to_salt",
    "normalize_salt",
    "salt_to_hex",
    "ConstructorArg",
    "DeploymentResult",
    "Create2Error",
    "InvalidSaltError",
    "EncodingError",
    "InvalidInputLengthError",
    "ConfigurationError",
    "RpcError",
    "TransactionTimeoutError",
    "DeploymentFailedError",
    "EventNotFoundError",
    "AddressMismatchError",
    "FactoryAddressMismatchError",
]
