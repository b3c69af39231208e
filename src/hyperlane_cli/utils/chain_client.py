import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.contract import Contract
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception
from web3.middleware import SignAndSendRawMiddlewareBuilder
from web3.types import EventData, TxParams, TxReceipt

from ..abi import ContractMethod
from ..errors import ContractCallError, CredentialParseError, RpcConnectionError

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("http", "https")


def is_rpc_url(url: str) -> bool:
    """Return True for an http or https URL with a host."""
    parsed = urlparse(url)
    return parsed.scheme in SUPPORTED_SCHEMES and bool(parsed.netloc)


class ChainClient:
    """
    Connection to a single chain's RPC endpoint.

    Can be used in two modes:
    1. Signing mode: Initialize with RPC URL and secret to submit transactions
    2. Read-only mode: Initialize with RPC URL only for block and log queries
    """

    def __init__(self, rpc_url: str, secret: str | None = None, chain_id: int | None = None) -> None:
        """
        Initialize the ChainClient.

        Args:
            rpc_url: HTTP(S) RPC URL for the chain (required)
            secret: Hex private key for signing transactions (optional - read-only when None)
            chain_id: Chain id bound into every signed transaction

        Raises:
            RpcConnectionError: If the URL is malformed or the node does not answer
            CredentialParseError: If the secret is not a valid private key
        """
        if not rpc_url:
            raise RpcConnectionError("RPC URL is required")

        if not is_rpc_url(rpc_url):
            raise RpcConnectionError(
                f"Invalid RPC URL: {rpc_url}. Expected an http or https endpoint"
            )

        self.rpc_url = rpc_url
        self.chain_id = chain_id
        self.account: LocalAccount | None = None

        self.w3 = Web3(Web3.HTTPProvider(self.rpc_url))

        # Parse the key before touching the network
        if secret is not None:
            self._add_signing_middleware(secret)

        if not self.w3.is_connected():
            raise RpcConnectionError(f"Failed to connect to RPC: {self.rpc_url}")

        logger.debug(
            f"Connected to {self.rpc_url} in {'signing' if self.account else 'read-only'} mode"
        )

    def _add_signing_middleware(self, secret: str) -> None:
        """
        Add signing middleware to the Web3 instance.

        Args:
            secret: Private key for signing transactions
        """
        if not secret.strip():
            raise CredentialParseError("Signing key is empty")

        try:
            account: LocalAccount = Account.from_key(secret.strip())
        except (ValueError, TypeError) as exc:
            raise CredentialParseError(f"Failed to parse signing key: {exc}") from exc

        self.w3.middleware_onion.add(SignAndSendRawMiddlewareBuilder.build(account))
        self.w3.eth.default_account = account.address
        self.account = account

    @property
    def address(self) -> str:
        """Address of the signing account."""
        if self.account is None:
            raise ValueError("Private key is required for signing transactions")
        return self.account.address

    def get_contract_abi(self, contract_name: str) -> list[dict[str, Any]]:
        """Fetches ABI of the given contract from the contracts folder.

        Args:
            contract_name: Name of the contract (without .json extension)

        Returns:
            List of ABI dictionaries for the contract
        """
        contract_path: Path = (
            Path(__file__).parent.parent / "contracts" / f"{contract_name}.json"
        ).resolve()

        with contract_path.open(encoding="utf-8") as file:
            contract_data: dict[str, Any] = json.load(file)

        return contract_data["abi"]

    def contract(self, address: str, abi_name: str) -> Contract:
        return self.w3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=self.get_contract_abi(abi_name),
        )

    def block_number(self) -> int:
        """Return the current block height."""
        try:
            return self.w3.eth.block_number
        except (Web3Exception, OSError) as exc:
            raise RpcConnectionError(f"Failed to fetch block number: {exc}") from exc

    def get_logs(
        self,
        address: str,
        abi_name: str,
        event_name: str,
        from_block: int,
        to_block: int | str = "latest",
    ) -> list[EventData]:
        """
        Fetch decoded logs of one event emitted by a contract.

        Args:
            address: Contract address
            abi_name: ABI file holding the event definition
            event_name: Name of the event
            from_block: First block of the range
            to_block: Last block of the range

        Returns:
            Decoded events in chain order
        """
        contract = self.contract(address, abi_name)
        if not hasattr(contract.events, event_name):
            raise ValueError(f"Event {event_name} not found in {abi_name} ABI")
        event_obj = getattr(contract.events, event_name)

        try:
            events = event_obj.get_logs(from_block=from_block, to_block=to_block)
        except (Web3Exception, OSError) as exc:
            raise RpcConnectionError(f"Failed to query {event_name} logs: {exc}") from exc

        logger.debug(f"Fetched {len(events)} {event_name} logs from block {from_block}")
        return list(events)

    def _function(self, address: str, method: ContractMethod, args: tuple) -> Any:
        method.check_args(args)
        contract = self.contract(address, method.abi_name)
        return getattr(contract.functions, method.name)(*args)

    def call(self, address: str, method: ContractMethod, *args: Any) -> Any:
        """
        Invoke a read-only contract method.

        Raises:
            ContractCallError: If the call reverts
        """
        function = self._function(address, method, args)
        try:
            return function.call()
        except ContractLogicError as exc:
            raise ContractCallError(f"{method.signature} reverted: {exc}") from exc
        except (Web3Exception, OSError) as exc:
            raise ContractCallError(f"{method.signature} call failed: {exc}") from exc

    def send_transaction(self, address: str, method: ContractMethod, *args: Any, value: int = 0) -> str:
        """
        Sign and submit a state-changing contract call.

        Args:
            address: Contract address
            method: Method to invoke
            *args: Method arguments, in ABI order
            value: Native value attached to the transaction, in wei

        Returns:
            Hex hash of the pending transaction

        Raises:
            ContractCallError: If gas estimation reverts or the node rejects the transaction
        """
        if value and not method.payable:
            raise TypeError(f"{method.signature} is not payable")

        function = self._function(address, method, args)
        tx_params: TxParams = {"from": self.address, "value": value}
        if self.chain_id is not None:
            tx_params["chainId"] = self.chain_id

        try:
            tx_hash = function.transact(tx_params)
        except ContractLogicError as exc:
            raise ContractCallError(f"{method.signature} would revert: {exc}") from exc
        except (Web3Exception, ValueError, OSError) as exc:
            raise ContractCallError(f"{method.signature} submission failed: {exc}") from exc

        return Web3.to_hex(tx_hash)

    def wait_for_receipt(self, tx_hash: str) -> TxReceipt | None:
        """
        Wait for a transaction to be mined.

        Returns:
            The receipt, or None if the transaction was not mined in time

        Raises:
            ContractCallError: If the transaction was mined but failed
        """
        try:
            receipt: TxReceipt = self.w3.eth.wait_for_transaction_receipt(tx_hash)
        except TimeExhausted:
            logger.warning(f"Timed out waiting for receipt of {tx_hash}")
            return None

        if receipt is None:
            return None

        if (status := receipt.get("status", 1)) != 1:
            raise ContractCallError(f"Transaction {tx_hash} failed with status={status}")

        logger.debug(f"Transaction {tx_hash} confirmed in block {receipt.get('blockNumber')}")
        return receipt
