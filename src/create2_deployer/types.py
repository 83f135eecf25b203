"""Data types and dataclasses for create2-deployer library."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ConstructorArg:
    """A single constructor argument: ABI type descriptor and value."""

    type: str  # e.g., "address", "uint256", "string"
    value: Any


@dataclass(frozen=True)
class DeploymentResult:
    """Outcome of a successful CREATE2 deployment."""

    transaction_hash: str  # 0x-prefixed hex
    address: str  # Lower-cased deployed address
    receipt: Dict[str, Any]  # Raw JSON-RPC transaction receipt
