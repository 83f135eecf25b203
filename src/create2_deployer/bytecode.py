"""Init code assembly for create2-deployer library."""

from typing import Any, Callable, Iterable, List, Sequence, Tuple, Union

from eth_abi import encode
from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_abi.exceptions import ParseError

from .exceptions import EncodingError, InvalidInputLengthError
from .types import ConstructorArg

HexOrBytes = Union[bytes, bytearray, str]
ArgLike = Union[ConstructorArg, Tuple[str, Any]]
Encoder = Callable[[Sequence[str], Sequence[Any]], bytes]


def hex_to_bytes(value: HexOrBytes, name: str = "value") -> bytes:
    """
    Coerce a hex string (with or without 0x prefix) or bytes to bytes.

    Args:
        value: Hex string or bytes-like value
        name: Name used in error messages

    Returns:
        Raw bytes

    Raises:
        InvalidInputLengthError: If the string is not valid hex
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not isinstance(value, str):
        raise InvalidInputLengthError(f"{name} must be bytes or a hex string, got {type(value).__name__}")

    digits = value[2:] if value[:2] in ("0x", "0X") else value
    try:
        return bytes.fromhex(digits)
    except ValueError as e:
        raise InvalidInputLengthError(f"{name} is not valid hex: {value!r}") from e


def _as_constructor_args(args: Iterable[ArgLike]) -> List[ConstructorArg]:
    result = []
    for arg in args:
        if isinstance(arg, ConstructorArg):
            result.append(arg)
        else:
            abi_type, value = arg
            result.append(ConstructorArg(abi_type, value))
    return result


def encode_constructor_args(
    constructor_args: Iterable[ArgLike], encoder: Encoder = encode
) -> bytes:
    """
    ABI-encode constructor arguments in declaration order.

    Args:
        constructor_args: Sequence of ConstructorArg or (type, value) pairs
        encoder: ABI encoder taking (types, values), defaults to eth_abi.encode

    Returns:
        Encoded arguments (empty bytes when there are no arguments)

    Raises:
        EncodingError: If the encoder rejects a type or value
    """
    args = _as_constructor_args(constructor_args)
    if not args:
        return b""

    types = [arg.type for arg in args]
    values = [arg.value for arg in args]
    try:
        return encoder(types, values)
    except (AbiEncodingError, ParseError, TypeError, ValueError) as e:
        raise EncodingError(f"Cannot encode constructor arguments {types}: {e}") from e


def build_init_code(
    creation_code: HexOrBytes,
    constructor_args: Iterable[ArgLike] = (),
    encoder: Encoder = encode,
) -> bytes:
    """
    Build init code: creation bytecode followed by encoded constructor arguments.

    Args:
        creation_code: Contract creation bytecode (bytes or hex string)
        constructor_args: Sequence of ConstructorArg or (type, value) pairs
        encoder: ABI encoder taking (types, values), defaults to eth_abi.encode

    Returns:
        Init code bytes; equal to creation_code when there are no arguments

    Raises:
        InvalidInputLengthError: If creation_code is not valid hex
        EncodingError: If the encoder rejects a type or value
    """
    code = hex_to_bytes(creation_code, "creation code")
    return code + encode_constructor_args(constructor_args, encoder)
