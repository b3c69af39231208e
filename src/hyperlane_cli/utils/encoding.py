"""
Helpers for the 32-byte values found in Hyperlane events and calls.

Topics and bytes32 values come back as ``bytes``/``HexBytes`` from a decoded
web3 response but as hex strings from raw JSON-RPC payloads, so every helper
accepts both.
"""

from typing import Any

from hexbytes import HexBytes
from web3 import Web3

from ..errors import ConfigError


def topic_to_bytes(topic: Any) -> bytes:
    """
    Convert an event topic (bytes or hex string) to raw bytes.

    :param topic: The topic to convert
    :return: Raw topic bytes, empty for unsupported types
    """
    if isinstance(topic, (bytes, bytearray)):
        return bytes(topic)
    if isinstance(topic, str):
        return bytes(HexBytes(topic)) if topic not in ("", "0x") else b""
    return b""


def to_bytes32(value: str | bytes) -> bytes:
    """
    Canonicalize a recipient to its 32-byte, chain-agnostic form.

    A 20-byte EVM address is left-padded with zeros; a 32-byte value is kept
    as is.

    Raises:
        ConfigError: If the value is neither 20 nor 32 bytes long
    """
    if isinstance(value, str):
        try:
            raw = bytes(HexBytes(value))
        except ValueError as exc:
            raise ConfigError(f"Invalid hex value: {value}") from exc
    else:
        raw = bytes(value)

    if len(raw) == 20:
        return raw.rjust(32, b"\0")
    if len(raw) == 32:
        return raw
    raise ConfigError(
        f"Expected a 20-byte address or 32-byte identifier, got {len(raw)} bytes"
    )


def bytes32_to_hex(value: bytes) -> str:
    """Render a 32-byte value as 0x-prefixed lowercase hex."""
    return Web3.to_hex(value)
