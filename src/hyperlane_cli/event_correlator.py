"""
Historical dispatch queries for the Hyperlane Mailbox.

The Mailbox emits a ``Dispatch`` and a ``DispatchId`` event for every message,
in the same transaction and in the same relative order. A query fetches both
streams over one block range and pairs them by position.
"""

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from web3 import Web3
from web3.types import EventData

from .abi import DISPATCH_EVENT, DISPATCH_ID_EVENT, MAILBOX_ABI
from .errors import LogCountMismatchError
from .models import CorrelatedDispatch, DispatchEvent, DispatchIdEvent
from .utils.chain_client import ChainClient
from .utils.encoding import to_bytes32, topic_to_bytes

if TYPE_CHECKING:
    from .config import QueryConfig

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_BLOCKS: int = 1000


def _tx_hash(event: Mapping[str, Any]) -> str:
    match event.get("transactionHash"):
        case None:
            return ""
        case bytes() as tx_hash_bytes:
            return Web3.to_hex(tx_hash_bytes)
        case str() as tx_hash:
            return tx_hash
        case other:
            logger.warning(f"Unexpected transaction hash type: {type(other)}")
            return ""


def parse_dispatch(event: EventData) -> DispatchEvent:
    """Convert a decoded ``Dispatch`` log into a DispatchEvent."""
    args: Mapping[str, Any] = event["args"]
    return DispatchEvent(
        sender=Web3.to_checksum_address(args["sender"]),
        destination=int(args["destination"]),
        recipient=topic_to_bytes(args["recipient"]),
        message=bytes(args["message"]),
        transaction_hash=_tx_hash(event),
        block_number=event.get("blockNumber", 0),
    )


def parse_dispatch_id(event: EventData) -> DispatchIdEvent:
    """Convert a decoded ``DispatchId`` log into a DispatchIdEvent."""
    return DispatchIdEvent(
        message_id=topic_to_bytes(event["args"]["messageId"]),
        transaction_hash=_tx_hash(event),
    )


@dataclass(frozen=True, slots=True)
class DispatchFilter:
    """Single-criterion filter over dispatches.

    Only the first criterion that is set is applied: sender, then
    destination, then recipient. With none set every dispatch matches.
    """
    sender: str | None = None
    destination: int | None = None
    recipient: bytes | None = None

    @classmethod
    def from_config(cls, config: "QueryConfig") -> "DispatchFilter":
        return cls(
            sender=config.sender_address,
            destination=(
                config.destination_domain.domain_id
                if config.destination_domain is not None
                else None
            ),
            recipient=config.recipient_bytes32,
        )

    def matches(self, dispatch: DispatchEvent) -> bool:
        if self.sender is not None:
            return dispatch.sender.lower() == self.sender.lower()
        if self.destination is not None:
            return dispatch.destination == self.destination
        if self.recipient is not None:
            return to_bytes32(dispatch.recipient) == to_bytes32(self.recipient)
        return True


def _check_log_counts(dispatch_count: int, dispatch_id_count: int) -> None:
    if dispatch_count != dispatch_id_count:
        raise LogCountMismatchError(
            f"Dispatch log count ({dispatch_count}) != dispatch id log count ({dispatch_id_count})"
        )


def correlate(
    dispatches: Sequence[DispatchEvent],
    dispatch_ids: Sequence[DispatchIdEvent],
    dispatch_filter: DispatchFilter | None = None,
) -> Iterator[CorrelatedDispatch]:
    """
    Pair dispatches with their ids by position and apply the filter lazily.

    Raises:
        LogCountMismatchError: If the two streams differ in length
    """
    _check_log_counts(len(dispatches), len(dispatch_ids))

    dispatch_filter = dispatch_filter or DispatchFilter()
    return (
        CorrelatedDispatch(dispatch=dispatch, dispatch_id=dispatch_id)
        for dispatch, dispatch_id in zip(dispatches, dispatch_ids)
        if dispatch_filter.matches(dispatch)
    )


class DispatchQuery:
    """Fetches and correlates dispatch events from one Mailbox."""

    def __init__(self, client: ChainClient, mailbox_address: str) -> None:
        """
        Initialize the query.

        Args:
            client: Read-only client for the origin chain
            mailbox_address: Address of the origin Mailbox contract
        """
        self.client = client
        self.mailbox_address = Web3.to_checksum_address(mailbox_address)

    def resolve_block_range(self, from_block: int | None) -> tuple[int, int]:
        """
        Return the (from, to) block range to query.

        Both log queries share the same upper bound so a block mined between
        them cannot make the streams disagree.
        """
        latest_block = self.client.block_number()
        if from_block is None:
            from_block = max(0, latest_block - DEFAULT_LOOKBACK_BLOCKS)
        return from_block, latest_block

    async def fetch(self, from_block: int | None = None) -> tuple[list[DispatchEvent], list[DispatchIdEvent]]:
        """
        Fetch both event streams over the same block range.

        Raises:
            LogCountMismatchError: If the streams differ in length
        """
        start, end = self.resolve_block_range(from_block)
        logger.info(f"Querying {self.mailbox_address} dispatches from block {start} to {end}")

        dispatch_logs = self.client.get_logs(
            self.mailbox_address, MAILBOX_ABI, DISPATCH_EVENT, from_block=start, to_block=end
        )
        dispatch_id_logs = self.client.get_logs(
            self.mailbox_address, MAILBOX_ABI, DISPATCH_ID_EVENT, from_block=start, to_block=end
        )

        _check_log_counts(len(dispatch_logs), len(dispatch_id_logs))

        logger.info(f"Found {len(dispatch_logs)} dispatches")
        return (
            [parse_dispatch(event) for event in dispatch_logs],
            [parse_dispatch_id(event) for event in dispatch_id_logs],
        )

    async def run(
        self,
        from_block: int | None = None,
        dispatch_filter: DispatchFilter | None = None,
    ) -> Iterator[CorrelatedDispatch]:
        dispatches, dispatch_ids = await self.fetch(from_block)
        return correlate(dispatches, dispatch_ids, dispatch_filter)


def print_dispatch(pair: CorrelatedDispatch, contract_address: str) -> None:
    """Print one query result."""
    result = pair.to_dict(contract_address)
    print(f"\nContract address: {result['contract_address']}")
    print(f"Sender: {result['sender']}")
    print(f"Destination: {result['destination']}")
    print(f"Recipient: {result['recipient']}")
    print(f"Hyperlane Message ID: {result['message_id']}")


async def query_dispatches(
    config: "QueryConfig",
    client_factory: Callable[[str], ChainClient] = ChainClient,
) -> int:
    """
    Run a historical query for the configured origin and print the results.

    Args:
        config: Query configuration
        client_factory: Builds a read-only client from an RPC URL

    Returns:
        Number of dispatches printed
    """
    mailbox_address, rpc_url = config.origin.dispatch_address_and_rpc_url(config.url)
    client = client_factory(rpc_url)

    query = DispatchQuery(client, mailbox_address)
    pairs = await query.run(config.from_block, DispatchFilter.from_config(config))

    count = 0
    for pair in pairs:
        print_dispatch(pair, query.mailbox_address)
        count += 1

    logger.info(f"{count} dispatches matched")
    return count
