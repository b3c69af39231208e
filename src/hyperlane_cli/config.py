"""Configuration management for the Hyperlane CLI.

Type-safe, validated settings for the ``send`` and ``query`` commands, built
from parsed command line arguments.
"""

import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path

from web3 import Web3

from .domains import ChainDomain, lookup_domain
from .errors import ConfigError
from .utils.chain_client import is_rpc_url
from .utils.encoding import bytes32_to_hex, to_bytes32

# Get logger for this module
logger = logging.getLogger(__name__)


def _validate_url(url: str | None) -> None:
    if url is not None and not is_rpc_url(url):
        raise ConfigError(
            f"Invalid RPC URL: {url}. Expected an http or https endpoint"
        )


def _checksum(address: str, field_name: str) -> str:
    if not Web3.is_address(address):
        raise ConfigError(f"Invalid {field_name}: {address}")
    return Web3.to_checksum_address(address)


@dataclass(frozen=True, slots=True)
class SendConfig:
    """Settings for dispatching a message and paying for its delivery.

    Attributes:
        origin: Domain the message is dispatched from
        destination: Domain the message is delivered to
        recipient: Recipient address or 32-byte identifier on the destination
        message: Message text, sent as its UTF-8 bytes
        private_key_path: File holding the hex signing key
        url: RPC URL override for the origin domain
    """

    origin: ChainDomain
    destination: ChainDomain
    recipient: str
    message: str
    private_key_path: Path
    url: str | None = None
    recipient_bytes32: bytes = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate send configuration."""
        object.__setattr__(self, "recipient_bytes32", to_bytes32(self.recipient))
        _validate_url(self.url)

        if not str(self.private_key_path):
            raise ConfigError("Private key path is required")

    @property
    def message_body(self) -> bytes:
        return self.message.encode("utf-8")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "SendConfig":
        """Build the configuration from parsed ``send`` arguments."""
        return cls(
            origin=lookup_domain(args.origin_domain),
            destination=lookup_domain(args.destination_domain),
            recipient=args.recipient,
            message=args.message,
            private_key_path=Path(args.private_key),
            url=args.url,
        )

    def log_config(self) -> None:
        """Log the configuration, leaving the key file contents out."""
        logger.info("Send Configuration:")
        logger.info(f"  Origin: {self.origin}")
        logger.info(f"  Destination: {self.destination}")
        logger.info(f"  Recipient: {bytes32_to_hex(self.recipient_bytes32)}")
        logger.info(f"  Message: {len(self.message_body)} bytes")
        logger.info(f"  Key File: {self.private_key_path}")
        logger.info(f"  RPC URL: {self.url or '[DEFAULT]'}")


@dataclass(frozen=True, slots=True)
class QueryConfig:
    """Settings for querying historical dispatches.

    At most one of the filters is applied, in the order sender address,
    destination domain, recipient.
    """

    origin: ChainDomain
    from_block: int | None = None
    sender_address: str | None = None
    destination_domain: ChainDomain | None = None
    recipient: str | None = None
    url: str | None = None
    recipient_bytes32: bytes | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate query configuration."""
        if self.from_block is not None and self.from_block < 0:
            raise ConfigError(f"from_block must be non-negative, got {self.from_block}")

        if self.sender_address is not None:
            object.__setattr__(
                self, "sender_address", _checksum(self.sender_address, "sender address")
            )

        if self.recipient is not None:
            object.__setattr__(self, "recipient_bytes32", to_bytes32(self.recipient))

        _validate_url(self.url)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "QueryConfig":
        """Build the configuration from parsed ``query`` arguments."""
        destination = (
            lookup_domain(args.destination_domain)
            if args.destination_domain is not None
            else None
        )
        return cls(
            origin=lookup_domain(args.origin_domain),
            from_block=args.from_block,
            sender_address=args.sender_address,
            destination_domain=destination,
            recipient=args.recipient,
            url=args.url,
        )

    def log_config(self) -> None:
        logger.info("Query Configuration:")
        logger.info(f"  Origin: {self.origin}")
        logger.info(
            f"  From Block: {self.from_block if self.from_block is not None else '[LATEST - 1000]'}"
        )
        if self.sender_address:
            logger.info(f"  Sender: {self.sender_address}")
        if self.destination_domain:
            logger.info(f"  Destination: {self.destination_domain}")
        if self.recipient_bytes32:
            logger.info(f"  Recipient: {bytes32_to_hex(self.recipient_bytes32)}")
