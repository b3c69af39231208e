"""
Ethereum signing key files.

A key file holds the hex-encoded 32-byte private key, without a ``0x``
prefix, and nothing else.
"""

import logging
from pathlib import Path

from eth_account import Account
from eth_account.signers.local import LocalAccount

from .errors import CredentialParseError, KeyFileError

logger = logging.getLogger(__name__)


def read_signing_key(path: Path) -> str:
    """Return the raw contents of a key file."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise KeyFileError(f"Failed to read signing key {path}: {exc}") from exc


def load_account(path: Path) -> LocalAccount:
    """Load the account stored in a key file."""
    secret = read_signing_key(path)
    try:
        return Account.from_key(secret.strip())
    except (ValueError, TypeError) as exc:
        raise CredentialParseError(f"Signing key {path} is not a valid private key") from exc


def generate_ethereum(path: Path) -> LocalAccount:
    """
    Generate a new signing key and save it into ``path``.

    Returns:
        The generated account
    """
    account: LocalAccount = Account.create()
    secret_hex = bytes(account.key).hex()
    try:
        Path(path).write_text(secret_hex, encoding="utf-8")
    except OSError as exc:
        raise KeyFileError(f"Failed to write signing key {path}: {exc}") from exc

    logger.debug(f"Wrote signing key for {account.address} to {path}")
    return account


def generate_ethereum_command(path: Path) -> LocalAccount | None:
    """Generate a key file unless one already exists at ``path``."""
    path = Path(path)
    # Never wipe an existing key file
    if path.exists():
        print(f"Signing key: {path} already exists")
        return None

    account = generate_ethereum(path)
    print("\n\nSigning key successfully created:")
    print(f"Key in hex: {bytes(account.key).hex()}")
    print(f"Key address: {account.address}")
    return account


def show_ethereum_address(path: Path) -> str:
    """Print and return the address of the key stored in ``path``."""
    address = load_account(path).address
    print(f"\n\nEthereum key address: {address}")
    return address
