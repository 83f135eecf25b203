"""Factory configuration and environment lookups for create2-deployer library."""

import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from .addresses import normalize_address
from .constants import DEPLOYED_EVENT, DEPLOYER_KEY_ENV, FACTORY_ABI, FACTORY_ADDRESS, RPC_URL_ENV
from .exceptions import ConfigurationError
from .factory_code import FACTORY_BYTECODE


def get_deployer_key(deployer_key: Optional[str] = None) -> Optional[str]:
    """
    Get the bootstrap deployer key.

    Args:
        deployer_key: Explicit key (defaults to $CREATE2_DEPLOYER_KEY)

    Returns:
        Hex private key, or None if not configured
    """
    if deployer_key is None:
        deployer_key = os.environ.get(DEPLOYER_KEY_ENV)
    return deployer_key


def get_rpc_url(rpc_url: Optional[str] = None) -> str:
    """
    Get the JSON-RPC endpoint URL.

    Args:
        rpc_url: Explicit URL (defaults to $ETH_RPC_URL)

    Returns:
        RPC URL

    Raises:
        ConfigurationError: If no URL is given and $ETH_RPC_URL is unset
    """
    if rpc_url is None:
        rpc_url = os.environ.get(RPC_URL_ENV)
    if not rpc_url:
        raise ConfigurationError(
            f"RPC URL required: set ${RPC_URL_ENV} environment variable or pass rpc_url parameter"
        )
    return rpc_url


@dataclass(frozen=True)
class FactoryConfig:
    """The factory deployment every CREATE2 prediction is made against."""

    address: str = FACTORY_ADDRESS
    abi: List[Dict[str, Any]] = field(default_factory=lambda: list(FACTORY_ABI))
    bytecode: bytes = FACTORY_BYTECODE
    deployer_key: Optional[str] = field(default=None, repr=False)
    event_name: str = DEPLOYED_EVENT

    def __post_init__(self):
        # Stored lower-cased so comparisons with derived addresses are exact
        object.__setattr__(self, "address", normalize_address(self.address))

    @classmethod
    def default(cls, deployer_key: Optional[str] = None) -> "FactoryConfig":
        """
        Build the well-known factory configuration.

        Args:
            deployer_key: Bootstrap key (defaults to $CREATE2_DEPLOYER_KEY)
        """
        return cls(deployer_key=get_deployer_key(deployer_key))

    def with_address(self, address: str) -> "FactoryConfig":
        """Return a copy pointing at a different factory deployment."""
        return replace(self, address=address)

    def require_deployer_key(self) -> str:
        """
        Return the bootstrap key.

        Raises:
            ConfigurationError: If no deployer key is configured
        """
        if not self.deployer_key:
            raise ConfigurationError(
                f"Deployer key required: set ${DEPLOYER_KEY_ENV} environment variable "
                "or pass deployer_key to FactoryConfig"
            )
        return self.deployer_key
