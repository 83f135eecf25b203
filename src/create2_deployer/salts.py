"""Salt normalization for create2-deployer library."""

import string
from dataclasses import dataclass
from typing import Union

from eth_utils import keccak

from .exceptions import InvalidSaltError

SALT_SIZE = 32

_HEX_DIGITS = set(string.hexdigits)


class Salt:
    """
    A CREATE2 salt.

    Equality and hashing use the normalized 32-byte form, so salts built from
    different input types compare equal when they normalize identically.
    """

    def to_bytes(self) -> bytes:
        raise NotImplementedError

    def hex(self) -> str:
        """Return the normalized salt as 0x-prefixed lower-case hex."""
        return "0x" + self.to_bytes().hex()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Salt):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()

    def __hash__(self) -> int:
        return hash(self.to_bytes())


@dataclass(frozen=True, eq=False)
class IntegerSalt(Salt):
    """Non-negative integer encoded big-endian in 32 bytes."""

    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidSaltError(f"Integer salt must be an int, got {type(self.value).__name__}")
        if self.value < 0:
            raise InvalidSaltError(f"Integer salt must be non-negative, got {self.value}")
        if self.value >= 1 << (8 * SALT_SIZE):
            raise InvalidSaltError(f"Integer salt does not fit in {SALT_SIZE} bytes: {self.value}")

    def to_bytes(self) -> bytes:
        return self.value.to_bytes(SALT_SIZE, "big")


@dataclass(frozen=True, eq=False)
class RawSalt(Salt):
    """Raw bytes, left-padded with zeros to 32 bytes."""

    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, (bytes, bytearray)):
            raise InvalidSaltError(f"Raw salt must be bytes, got {type(self.value).__name__}")
        if len(self.value) > SALT_SIZE:
            raise InvalidSaltError(f"Raw salt must be at most {SALT_SIZE} bytes, got {len(self.value)}")

    @classmethod
    def from_hex(cls, hex_str: str) -> "RawSalt":
        """
        Parse a hex literal, with or without 0x prefix.

        Odd-length literals are treated as numbers and left-padded with a zero nibble.

        Raises:
            InvalidSaltError: If the literal is not hex or exceeds 64 digits
        """
        digits = hex_str[2:] if hex_str[:2] in ("0x", "0X") else hex_str
        if not digits or not set(digits) <= _HEX_DIGITS:
            raise InvalidSaltError(f"Salt is not a valid hex literal: {hex_str!r}")
        if len(digits) > 2 * SALT_SIZE:
            raise InvalidSaltError(
                f"Hex salt must be at most {2 * SALT_SIZE} digits, got {len(digits)}: {hex_str!r}"
            )
        if len(digits) % 2:
            digits = "0" + digits
        return cls(bytes.fromhex(digits))

    def to_bytes(self) -> bytes:
        return bytes(self.value).rjust(SALT_SIZE, b"\x00")


@dataclass(frozen=True, eq=False)
class StringSalt(Salt):
    """Opaque string; the salt is keccak256 of its UTF-8 encoding."""

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise InvalidSaltError(f"String salt must be a str, got {type(self.value).__name__}")

    def to_bytes(self) -> bytes:
        return keccak(text=self.value)


SaltLike = Union[Salt, int, str, bytes, bytearray]


def _is_bare_hex32(value: str) -> bool:
    return len(value) == 2 * SALT_SIZE and set(value) <= _HEX_DIGITS


def _is_hex_literal(value: str) -> bool:
    digits = value[2:]
    return value[:2] in ("0x", "0X") and bool(digits) and set(digits) <= _HEX_DIGITS


def to_salt(value: SaltLike) -> Salt:
    """
    Resolve a loosely-typed salt into a Salt variant.

    Resolution rules:
    - Salt instances are returned unchanged
    - int -> IntegerSalt (bool is rejected)
    - bytes -> RawSalt
    - "0x"-prefixed str of hex digits -> RawSalt (at most 64 digits)
    - unprefixed str of exactly 64 hex digits -> RawSalt
    - any other str -> StringSalt (hashed)

    Args:
        value: Salt input

    Returns:
        Salt variant

    Raises:
        InvalidSaltError: If the value cannot be resolved or does not fit in 32 bytes
    """
    if isinstance(value, Salt):
        return value
    if isinstance(value, bool):
        raise InvalidSaltError("Boolean is not a valid salt")
    if isinstance(value, int):
        return IntegerSalt(value)
    if isinstance(value, (bytes, bytearray)):
        return RawSalt(bytes(value))
    if isinstance(value, str):
        if _is_hex_literal(value) or _is_bare_hex32(value):
            return RawSalt.from_hex(value)
        return StringSalt(value)
    raise InvalidSaltError(f"Unsupported salt type: {type(value).__name__}")


def normalize_salt(value: SaltLike) -> bytes:
    """Return the canonical 32-byte form of a salt."""
    return to_salt(value).to_bytes()


def salt_to_hex(value: SaltLike) -> str:
    """Return the canonical salt as 0x-prefixed lower-case hex (66 characters)."""
    return to_salt(value).hex()
