"""Command line entry point for the Hyperlane CLI.

Subcommands:
  key generate-ethereum <path>
  key show-ethereum-address <path>
  send <origin> <destination> <recipient> <message> <private-key> [--url URL]
  query <origin> [--from-block N] [--sender-address A]
        [--destination-domain D] [--recipient R] [--url URL]
  show-domains
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .config import QueryConfig, SendConfig
from .dispatcher import DispatchOrchestrator
from .domains import show_domains
from .errors import HyperlaneCliError
from .event_correlator import query_dispatches
from .keys import generate_ethereum_command, show_ethereum_address

# Get logger for this module
logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level: int = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _block_number(value: str) -> int:
    try:
        block = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value} is not a block number") from None
    if block < 0:
        raise argparse.ArgumentTypeError(f"{value} is not a block number")
    return block


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hyperlane-cli",
        description="Dispatch, pay for and query Hyperlane interchain messages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Environment Variables:
  LOG_LEVEL - Logging level (can be overridden with --log-level)
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: INFO)"
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    # Key commands
    key_parser = subcommands.add_parser("key", help="Key commands, generate key, etc...")
    key_commands = key_parser.add_subparsers(dest="key_command", required=True)
    generate = key_commands.add_parser(
        "generate-ethereum", help="Generates a signing key for ethereum chain"
    )
    generate.add_argument("path", type=Path, help="Full path to the signing key file")
    show_address = key_commands.add_parser(
        "show-ethereum-address", help="Shows private key address"
    )
    show_address.add_argument("path", type=Path, help="Full path to the signing key file")

    # Send
    send = subcommands.add_parser("send", help="Dispatch a message and pay for its delivery")
    send.add_argument("origin_domain", help="Original sender domain")
    send.add_argument("destination_domain", help="Destination chain domain")
    send.add_argument("recipient", help="Recipient contract on the destination chain")
    send.add_argument("message", help="Message to be sent to the recipient")
    send.add_argument("private_key", help="Full path to the private key")
    send.add_argument(
        "--url",
        default=None,
        help="URL override, useful when default CLI provided URL does not work"
    )

    # Query
    query = subcommands.add_parser("query", help="Query dispatched messages")
    query.add_argument("origin_domain", help="Hyperlane contract domain to query messages from")
    query.add_argument(
        "--from-block",
        type=_block_number,
        default=None,
        help="Block to query historic data from. Queries last 1000 blocks by default"
    )
    query.add_argument("--sender-address", default=None, help="Original sender of the transaction")
    query.add_argument("--destination-domain", default=None, help="Hyperlane destination chain domain")
    query.add_argument("--recipient", default=None, help="Recipient contract on the destination domain")
    query.add_argument("--url", default=None, help="URL override for the origin domain")

    subcommands.add_parser("show-domains", help="List the known Hyperlane domains")
    return parser


async def process(args: argparse.Namespace) -> None:
    """Dispatch a parsed command to its handler."""
    match args.command:
        case "key" if args.key_command == "generate-ethereum":
            generate_ethereum_command(args.path)
        case "key":
            show_ethereum_address(args.path)
        case "show-domains":
            show_domains()
        case "send":
            config = SendConfig.from_args(args)
            config.log_config()
            result = await DispatchOrchestrator(config).send()
            logger.debug(f"Dispatch result: {result.to_dict()}")
        case "query":
            config = QueryConfig.from_args(args)
            config.log_config()
            await query_dispatches(config)


async def main(argv: list[str] | None = None) -> int:
    """Main entry point for the Hyperlane CLI.

    Returns:
        Process exit code
    """
    args: argparse.Namespace = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        await process(args)
    except HyperlaneCliError as e:
        logger.error(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, shutting down...")
        return 130
    except Exception as e:
        logger.error(f"Fatal Error: {e}", exc_info=True)
        return 1
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))
