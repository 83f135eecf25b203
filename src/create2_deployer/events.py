"""Deployment event parsing for create2-deployer library."""

import logging
from typing import Any, Dict, List, Optional

from eth_abi import decode
from eth_utils import event_abi_to_log_topic

from .addresses import normalize_address
from .bytecode import hex_to_bytes
from .constants import DEPLOYED_EVENT
from .exceptions import EventNotFoundError

logger = logging.getLogger(__name__)


def find_event_abi(abi: List[Dict[str, Any]], event_name: str) -> Dict[str, Any]:
    """
    Get ABI definition for a specific event.

    Args:
        abi: Contract ABI
        event_name: Name of event

    Returns:
        Event ABI definition

    Raises:
        EventNotFoundError: If event not found in ABI
    """
    # Linear search through ABI for event
    for item in abi:
        if item.get("type") == "event" and item.get("name") == event_name:
            return item

    raise EventNotFoundError(f"Event '{event_name}' not found in factory ABI")


def _address_input(event_abi: Dict[str, Any]) -> int:
    for index, item in enumerate(event_abi["inputs"]):
        if item["type"] == "address":
            return index
    raise EventNotFoundError(f"Event '{event_abi['name']}' has no address argument")


def _decode_address(log: Dict[str, Any], event_abi: Dict[str, Any]) -> str:
    inputs = event_abi["inputs"]
    position = _address_input(event_abi)
    target = inputs[position]

    if target.get("indexed"):
        # topics[0] is the event signature
        topic_index = 1 + sum(1 for item in inputs[:position] if item.get("indexed"))
        topic = hex_to_bytes(log["topics"][topic_index], "topic")
        return normalize_address(topic[-20:])

    data_types = [item["type"] for item in inputs if not item.get("indexed")]
    data_index = sum(1 for item in inputs[:position] if not item.get("indexed"))
    values = decode(data_types, hex_to_bytes(log.get("data", "0x"), "log data"))
    return normalize_address(values[data_index])


def parse_deployed_address(
    receipt: Dict[str, Any],
    abi: List[Dict[str, Any]],
    event_name: str = DEPLOYED_EVENT,
    emitter: Optional[str] = None,
) -> str:
    """
    Extract the deployed contract address from a transaction receipt.

    Logs are scanned in order and the first one matching the event topic,
    its number of indexed arguments and the emitter (if given) is decoded.
    A factory emits exactly one such event per deployment; any further
    matches are ignored.

    Args:
        receipt: Raw JSON-RPC transaction receipt
        abi: Factory ABI containing the event definition
        event_name: Name of the deployment event
        emitter: Only consider logs emitted by this address

    Returns:
        Lower-cased address from the event

    Raises:
        EventNotFoundError: If the ABI or the receipt lacks the event
    """
    event_abi = find_event_abi(abi, event_name)
    topic = event_abi_to_log_topic(event_abi)
    source = normalize_address(emitter) if emitter is not None else None
    # Same signature with different indexing gives a different topic count
    topic_count = 1 + sum(1 for item in event_abi["inputs"] if item.get("indexed"))

    matches = []
    for log in receipt.get("logs") or []:
        topics = log.get("topics") or []
        if not topics or hex_to_bytes(topics[0], "topic") != topic:
            continue
        if len(topics) != topic_count:
            continue
        if source is not None and log.get("address", "").lower() != source:
            continue
        matches.append(log)

    if not matches:
        raise EventNotFoundError(
            f"No '{event_name}' event in receipt of transaction {receipt.get('transactionHash')}"
        )
    if len(matches) > 1:
        logger.debug("Ignoring %d additional '%s' events", len(matches) - 1, event_name)

    return _decode_address(matches[0], event_abi)
