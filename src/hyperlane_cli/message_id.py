"""Message id extraction from dispatch transaction receipts."""

import logging
from collections.abc import Mapping
from typing import Any

from .abi import DISPATCH_ID_TOPIC
from .errors import MessageIdNotFoundError
from .utils.encoding import topic_to_bytes

logger = logging.getLogger(__name__)


def extract_message_id(receipt: Mapping[str, Any]) -> bytes:
    """
    Return the Hyperlane message id carried by a dispatch receipt.

    The Mailbox emits ``DispatchId(bytes32 indexed messageId)`` next to every
    ``Dispatch``; the id is the second topic of the first log whose first
    topic is the ``DispatchId`` signature hash.

    Args:
        receipt: Transaction receipt of the dispatch call

    Returns:
        The 32-byte message id

    Raises:
        MessageIdNotFoundError: If no log carries a DispatchId topic
    """
    for log in receipt.get("logs", []):
        topics = log.get("topics", [])
        if not topics or topic_to_bytes(topics[0]) != DISPATCH_ID_TOPIC:
            continue
        if len(topics) < 2:
            raise MessageIdNotFoundError("DispatchId log has no message id topic")

        message_id = topic_to_bytes(topics[1])
        logger.debug(f"Found message id 0x{message_id.hex()} in receipt logs")
        return message_id

    raise MessageIdNotFoundError("Failed to obtain message ID from transaction receipt")
