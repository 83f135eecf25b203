"""CREATE2 address computation utilities (EIP-1014).

The address a CREATE2 deployment lands at is:
    address = keccak256(0xff ++ deployer ++ salt ++ keccak256(init_code))[12:]

Every prediction in this library goes through compute_create2_address.

Reference: https://eips.ethereum.org/EIPS/eip-1014
"""

import rlp
from eth_utils import keccak

from .bytecode import HexOrBytes, hex_to_bytes
from .exceptions import InvalidInputLengthError

ADDRESS_SIZE = 20
HASH_SIZE = 32
CREATE2_PREFIX = b"\xff"


def _fixed_bytes(value: HexOrBytes, size: int, name: str) -> bytes:
    data = hex_to_bytes(value, name)
    if len(data) != size:
        raise InvalidInputLengthError(f"{name} must be {size} bytes, got {len(data)}")
    return data


def _to_address_hex(raw: bytes) -> str:
    return "0x" + raw.hex()


def normalize_address(address: HexOrBytes) -> str:
    """
    Validate an address and return it lower-cased with 0x prefix.

    Raises:
        InvalidInputLengthError: If address is not 20 bytes of valid hex
    """
    return _to_address_hex(_fixed_bytes(address, ADDRESS_SIZE, "Address"))


def compute_create2_address(
    deployer: HexOrBytes,
    salt: HexOrBytes,
    init_code: HexOrBytes,
) -> str:
    """
    Compute CREATE2 contract address.

    Args:
        deployer: 20-byte address of the contract executing CREATE2 (the factory)
        salt: 32-byte salt
        init_code: Creation bytecode including encoded constructor arguments

    Returns:
        Lower-cased 0x-prefixed address (42 characters)

    Raises:
        InvalidInputLengthError: If deployer is not 20 bytes, salt is not 32 bytes,
            or any input is not valid hex

    Example:
        >>> compute_create2_address(bytes(20), bytes(32), b"\\x00")
        '0x4d1a2e2bb4f88f0250f26ffff098b0b30b26bf38'
    """
    code = hex_to_bytes(init_code, "Init code")
    return compute_create2_address_from_code_hash(deployer, salt, keccak(code))


def compute_create2_address_from_code_hash(
    deployer: HexOrBytes,
    salt: HexOrBytes,
    init_code_hash: HexOrBytes,
) -> str:
    """
    Compute CREATE2 address with a pre-computed init code hash.

    Args:
        deployer: 20-byte deployer address
        salt: 32-byte salt
        init_code_hash: 32-byte keccak256 hash of the init code

    Returns:
        Lower-cased 0x-prefixed address

    Raises:
        InvalidInputLengthError: If lengths are incorrect
    """
    sender = _fixed_bytes(deployer, ADDRESS_SIZE, "Deployer address")
    salt_bytes = _fixed_bytes(salt, HASH_SIZE, "Salt")
    code_hash = _fixed_bytes(init_code_hash, HASH_SIZE, "Init code hash")

    preimage = CREATE2_PREFIX + sender + salt_bytes + code_hash
    return _to_address_hex(keccak(preimage)[12:])


def compute_create_address(sender: HexOrBytes, nonce: int) -> str:
    """
    Compute CREATE (nonce-based) contract address.

    The contract address is the last 20 bytes of keccak256(rlp([sender, nonce])).

    Args:
        sender: 20-byte address sending the creation transaction
        nonce: Sender's nonce at the time of the transaction

    Returns:
        Lower-cased 0x-prefixed address

    Raises:
        InvalidInputLengthError: If sender is not 20 bytes
        ValueError: If nonce is negative
    """
    sender_bytes = _fixed_bytes(sender, ADDRESS_SIZE, "Sender address")
    if nonce < 0:
        raise ValueError(f"Nonce must be non-negative, got {nonce}")

    encoded = rlp.encode([sender_bytes, nonce])
    return _to_address_hex(keccak(encoded)[12:])
