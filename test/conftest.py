"""Shared fixtures for the Hyperlane CLI tests."""

from pathlib import Path

import pytest
from hexbytes import HexBytes

from hyperlane_cli.abi import DISPATCH_ID_TOPIC

TEST_PRIVATE_KEY = "1" * 64
SENDER = "0x" + "aa" * 20
OTHER_SENDER = "0x" + "cc" * 20
RECIPIENT = "0x" + "bb" * 20
RECIPIENT_BYTES32 = bytes(12) + bytes.fromhex("bb" * 20)
MESSAGE_ID = bytes.fromhex("12" * 32)


@pytest.fixture
def key_file(tmp_path: Path) -> Path:
    """Write a signing key file and return its path."""
    path = tmp_path / "signing_key"
    path.write_text(TEST_PRIVATE_KEY)
    return path


def make_dispatch_log(
    sender: str = SENDER,
    destination: int = 80001,
    recipient: bytes = RECIPIENT_BYTES32,
    message: bytes = b"hello",
    tx_byte: str = "01",
    block_number: int = 100,
) -> dict:
    """Build a decoded Dispatch event as returned by web3."""
    return {
        "args": {
            "sender": sender,
            "destination": destination,
            "recipient": recipient,
            "message": message,
        },
        "event": "Dispatch",
        "transactionHash": HexBytes("0x" + tx_byte * 32),
        "blockNumber": block_number,
    }


def make_dispatch_id_log(message_id: bytes = MESSAGE_ID, tx_byte: str = "01") -> dict:
    """Build a decoded DispatchId event as returned by web3."""
    return {
        "args": {"messageId": message_id},
        "event": "DispatchId",
        "transactionHash": HexBytes("0x" + tx_byte * 32),
        "blockNumber": 100,
    }


def make_receipt(*logs: dict, status: int = 1) -> dict:
    """Build a transaction receipt holding the given raw logs."""
    return {"status": status, "blockNumber": 100, "logs": list(logs)}


def dispatch_id_raw_log(message_id: bytes = MESSAGE_ID) -> dict:
    """Build the raw DispatchId log entry found in a dispatch receipt."""
    return {"topics": [HexBytes(DISPATCH_ID_TOPIC), HexBytes(message_id)], "data": HexBytes(b"")}
