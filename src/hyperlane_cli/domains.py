"""Registry of known Hyperlane domains.

Domains are looked up from a static table rather than branched on in code.
Mailbox and gas paymaster addresses are protocol-wide constants, one pair per
network class, taken from https://docs.hyperlane.xyz/docs/resources/addresses.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .errors import MissingRpcUrlError, UnknownDomainError, UnsupportedNetworkError

logger = logging.getLogger(__name__)


class DomainType(Enum):
    """Network class of a domain."""
    TESTNET = "testnet"
    MAINNET = "mainnet"
    LOCAL_TEST_CHAIN = "localtestchain"


@dataclass(frozen=True, slots=True)
class NetworkContracts:
    """Deployed protocol contracts shared by every domain of one network class."""
    mailbox_address: str
    paymaster_address: str


NETWORK_CONTRACTS: dict[DomainType, NetworkContracts] = {
    DomainType.TESTNET: NetworkContracts(
        mailbox_address="0xCC737a94FecaeC165AbCf12dED095BB13F037685",
        paymaster_address="0xF90cB82a76492614D07B82a7658917f3aC811Ac1",
    ),
    DomainType.MAINNET: NetworkContracts(
        mailbox_address="0x35231d4c2D8B8ADcB5617A638A0c4548684c7C70",
        paymaster_address="0x56f52c0A1ddcD557285f7CBc782D3d83096CE1Cc",
    ),
}


@dataclass(frozen=True, slots=True)
class ChainDomain:
    """A Hyperlane domain.

    Attributes:
        domain_id: Hyperlane domain id, equal to the EVM chain id
        name: Lowercase domain name used on the command line
        domain_type: Network class the domain belongs to
        default_rpc_url: Built-in RPC endpoint, if one is known
    """
    domain_id: int
    name: str
    domain_type: DomainType
    default_rpc_url: str | None = None

    def __str__(self) -> str:
        return f"{self.name} ({self.domain_id})"

    def _network_contracts(self) -> NetworkContracts:
        try:
            return NETWORK_CONTRACTS[self.domain_type]
        except KeyError:
            raise UnsupportedNetworkError(
                f"Domain type is not yet supported: {self.domain_type.value}"
            ) from None

    def paymaster_address(self) -> str:
        """Return the InterchainGasPaymaster address for this domain's network class."""
        return self._network_contracts().paymaster_address

    def dispatch_address_and_rpc_url(self, override_url: str | None = None) -> tuple[str, str]:
        """
        Return the Mailbox address and the RPC URL to reach this domain.

        Args:
            override_url: RPC URL supplied by the caller, preferred over the default

        Returns:
            Tuple of (mailbox address, rpc url)

        Raises:
            UnsupportedNetworkError: If the network class has no deployment
            MissingRpcUrlError: If no override is given and no default is known
        """
        mailbox_address = self._network_contracts().mailbox_address

        if override_url:
            return mailbox_address, override_url
        if not self.default_rpc_url:
            raise MissingRpcUrlError(
                f"No default RPC URL is known for {self.name}, pass one with --url"
            )
        return mailbox_address, self.default_rpc_url


KNOWN_DOMAINS: tuple[ChainDomain, ...] = (
    # Mainnets
    ChainDomain(1, "ethereum", DomainType.MAINNET),
    ChainDomain(10, "optimism", DomainType.MAINNET),
    ChainDomain(56, "binancesmartchain", DomainType.MAINNET),
    ChainDomain(100, "gnosis", DomainType.MAINNET),
    ChainDomain(137, "polygon", DomainType.MAINNET),
    ChainDomain(1284, "moonbeam", DomainType.MAINNET),
    ChainDomain(42161, "arbitrum", DomainType.MAINNET),
    ChainDomain(42220, "celo", DomainType.MAINNET),
    ChainDomain(43114, "avalanche", DomainType.MAINNET),
    # Testnets
    ChainDomain(
        5,
        "goerli",
        DomainType.TESTNET,
        "https://goerli.infura.io/v3/9aa3d95b3bc440fa88ea12eaa4456161",
    ),
    ChainDomain(97, "binancesmartchaintestnet", DomainType.TESTNET),
    ChainDomain(420, "optimismgoerli", DomainType.TESTNET),
    ChainDomain(1287, "moonbasealpha", DomainType.TESTNET),
    ChainDomain(43113, "fuji", DomainType.TESTNET),
    ChainDomain(44787, "alfajores", DomainType.TESTNET),
    ChainDomain(80001, "mumbai", DomainType.TESTNET),
    ChainDomain(421613, "arbitrumgoerli", DomainType.TESTNET),
    ChainDomain(11155111, "sepolia", DomainType.TESTNET),
    # Local test chains
    ChainDomain(13371, "test1", DomainType.LOCAL_TEST_CHAIN),
    ChainDomain(13372, "test2", DomainType.LOCAL_TEST_CHAIN),
    ChainDomain(13373, "test3", DomainType.LOCAL_TEST_CHAIN),
)

_DOMAINS_BY_NAME: dict[str, ChainDomain] = {domain.name: domain for domain in KNOWN_DOMAINS}
_DOMAINS_BY_ID: dict[int, ChainDomain] = {domain.domain_id: domain for domain in KNOWN_DOMAINS}


def show_domains() -> None:
    """Print every known domain with its id."""
    print("\n\nAvailable hyperlane domains:")
    for domain in KNOWN_DOMAINS:
        print(f"{domain.name}: [ID = {domain.domain_id}]")


def lookup_domain(identifier: str | int) -> ChainDomain:
    """
    Resolve a domain by name (case-insensitive) or numeric id.

    The full domain list is printed before failing so the caller can pick a
    valid one.

    Raises:
        UnknownDomainError: If the identifier matches no known domain
    """
    key = str(identifier).strip().lower()

    domain = _DOMAINS_BY_NAME.get(key)
    if domain is None and key.isdigit():
        domain = _DOMAINS_BY_ID.get(int(key))

    if domain is None:
        show_domains()
        raise UnknownDomainError(f"{identifier} is an invalid domain")

    logger.debug(f"Resolved domain {identifier!r} to {domain}")
    return domain
