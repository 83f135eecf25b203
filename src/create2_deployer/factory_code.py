"""Bytecode of the CREATE2 factory contract.

The runtime accepts a single entry point, deploy(bytes,bytes32). It copies
the code argument into memory, runs CREATE2 with the salt argument, reverts
when CREATE2 yields the zero address (address already taken or the init code
reverted) and emits Deployed(address indexed) with the new address.

Calldata layout for deploy(bytes,bytes32):
    0x00  selector (4 bytes)
    0x04  offset of code (always 0x40)
    0x24  salt
    0x44  length of code
    0x64  code
"""

from eth_utils import event_signature_to_log_topic, function_signature_to_4byte_selector

from .constants import DEPLOY_SIGNATURE, DEPLOYED_EVENT_SIGNATURE

DEPLOY_SELECTOR = function_signature_to_4byte_selector(DEPLOY_SIGNATURE)
DEPLOYED_TOPIC = event_signature_to_log_topic(DEPLOYED_EVENT_SIGNATURE)

# Jump destinations in the runtime below
_REVERT_DEST = 0x0F
_DEPLOY_DEST = 0x14


def push_bytes(val: int, size: int) -> bytes:
    if size < 1 or size > 32:
        raise ValueError("invalid PUSH size")
    opcode = 0x5F + size  # PUSH1 = 0x60
    return bytes([opcode]) + val.to_bytes(size, "big")


def build_runtime_code() -> bytes:
    runtime = b"".join(
        [
            # 0x00: selector = calldata[0:4]
            b"\x60\x00",  # PUSH1 0x00
            b"\x35",  # CALLDATALOAD
            b"\x60\xe0",  # PUSH1 0xe0
            b"\x1c",  # SHR
            b"\x63" + DEPLOY_SELECTOR,  # PUSH4 selector
            b"\x14",  # EQ
            push_bytes(_DEPLOY_DEST, 1),
            b"\x57",  # JUMPI
            # 0x0f: revert(0, 0)
            b"\x5b",  # JUMPDEST
            b"\x60\x00",  # PUSH1 0x00
            b"\x80",  # DUP1
            b"\xfd",  # REVERT
            # 0x14: copy code to memory[0:len]
            b"\x5b",  # JUMPDEST
            b"\x60\x44",  # PUSH1 0x44
            b"\x35",  # CALLDATALOAD (len)
            b"\x80",  # DUP1
            b"\x60\x64",  # PUSH1 0x64
            b"\x60\x00",  # PUSH1 0x00
            b"\x37",  # CALLDATACOPY
            # create2(value=0, offset=0, size=len, salt)
            b"\x60\x24",  # PUSH1 0x24
            b"\x35",  # CALLDATALOAD (salt)
            b"\x90",  # SWAP1
            b"\x60\x00",  # PUSH1 0x00
            b"\x60\x00",  # PUSH1 0x00
            b"\xf5",  # CREATE2
            # revert on zero address
            b"\x80",  # DUP1
            b"\x15",  # ISZERO
            push_bytes(_REVERT_DEST, 1),
            b"\x57",  # JUMPI
            # log2(0, 0, topic, addr)
            b"\x7f" + DEPLOYED_TOPIC,  # PUSH32 topic
            b"\x60\x00",  # PUSH1 0x00
            b"\x60\x00",  # PUSH1 0x00
            b"\xa2",  # LOG2
            b"\x00",  # STOP
        ]
    )
    if runtime[_REVERT_DEST] != 0x5B or runtime[_DEPLOY_DEST] != 0x5B:
        raise ValueError("jump destinations do not point at JUMPDEST")
    return runtime


def build_creation_code(runtime: bytes) -> bytes:
    """Wrap runtime code in a prefix that copies it to memory and returns it."""
    length = len(runtime)
    if length > 0xFF:
        raise ValueError(f"runtime too large for a one-byte length: {length}")

    prefix_len = 12
    prefix = b"".join(
        [
            push_bytes(length, 1),
            push_bytes(prefix_len, 1),
            b"\x60\x00",  # PUSH1 0x00
            b"\x39",  # CODECOPY
            push_bytes(length, 1),
            b"\x60\x00",  # PUSH1 0x00
            b"\xf3",  # RETURN
        ]
    )
    if len(prefix) != prefix_len:
        raise ValueError(f"creation prefix is {len(prefix)} bytes, expected {prefix_len}")
    return prefix + runtime


FACTORY_RUNTIME_CODE = build_runtime_code()
FACTORY_BYTECODE = build_creation_code(FACTORY_RUNTIME_CODE)
