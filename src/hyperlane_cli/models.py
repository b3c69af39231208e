"""Data models for the Hyperlane CLI.

Immutable records for the Mailbox events read during a query and for the
values produced while dispatching and paying for a message.
"""

from dataclasses import dataclass
from typing import Any

from .utils.encoding import bytes32_to_hex


@dataclass(frozen=True, slots=True)
class DispatchEvent:
    """A ``Dispatch`` event emitted by the Mailbox.

    Attributes:
        sender: Checksummed address of the message sender
        destination: Destination domain id
        recipient: Recipient in its 32-byte form
        message: Raw message body
        transaction_hash: Hash of the emitting transaction
        block_number: Block the event was emitted in
    """
    sender: str
    destination: int
    recipient: bytes
    message: bytes
    transaction_hash: str = ""
    block_number: int = 0


@dataclass(frozen=True, slots=True)
class DispatchIdEvent:
    """A ``DispatchId`` event, emitted alongside each ``Dispatch``."""
    message_id: bytes
    transaction_hash: str = ""

    @property
    def message_id_hex(self) -> str:
        return bytes32_to_hex(self.message_id)


@dataclass(frozen=True, slots=True)
class CorrelatedDispatch:
    """A dispatch paired with its message id by position in the query results."""
    dispatch: DispatchEvent
    dispatch_id: DispatchIdEvent

    def to_dict(self, contract_address: str) -> dict[str, Any]:
        """Convert to the fields reported for a query result."""
        return {
            "contract_address": contract_address,
            "sender": self.dispatch.sender,
            "destination": self.dispatch.destination,
            "recipient": bytes32_to_hex(self.dispatch.recipient),
            "message_id": self.dispatch_id.message_id_hex,
        }


@dataclass(frozen=True, slots=True)
class GasQuote:
    """Fee quoted by the gas paymaster, in the origin chain's native unit (wei)."""
    destination: int
    gas_amount: int
    amount: int

    def __str__(self) -> str:
        return str(self.amount)


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Outcome of a completed dispatch-and-pay run."""
    dispatch_tx_hash: str
    message_id: bytes
    quote: GasQuote
    payment_tx_hash: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "dispatch_tx_hash": self.dispatch_tx_hash,
            "message_id": bytes32_to_hex(self.message_id),
            "quote": self.quote.amount,
            "payment_tx_hash": self.payment_tx_hash,
        }
