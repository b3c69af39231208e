"""Exceptions raised by the Hyperlane CLI.

Every failure is terminal for the invocation; the CLI entry point turns
``HyperlaneCliError`` into an error line and a non-zero exit code.
"""


class HyperlaneCliError(Exception):
    """Base class for all CLI failures."""


class ConfigError(HyperlaneCliError, ValueError):
    """Raised when command arguments are invalid."""


class UnknownDomainError(HyperlaneCliError):
    """Raised when a domain name or id is not in the registry."""


class UnsupportedNetworkError(HyperlaneCliError):
    """Raised for domains that are neither testnet nor mainnet."""


class MissingRpcUrlError(HyperlaneCliError):
    """Raised when no RPC URL is known for a domain and none was given."""


class KeyFileError(HyperlaneCliError):
    """Raised when a signing key file cannot be read or written."""


class CredentialParseError(HyperlaneCliError):
    """Raised when a signing key cannot be parsed."""


class RpcConnectionError(HyperlaneCliError):
    """Raised when the RPC endpoint is malformed or unreachable."""


class LogCountMismatchError(HyperlaneCliError):
    """Raised when Dispatch and DispatchId log counts differ."""


class MissingReceiptError(HyperlaneCliError):
    """Raised when a submitted transaction yields no receipt."""


class MessageIdNotFoundError(HyperlaneCliError):
    """Raised when a dispatch receipt carries no DispatchId log."""


class ContractCallError(HyperlaneCliError):
    """Raised when a contract call reverts or a transaction fails."""
