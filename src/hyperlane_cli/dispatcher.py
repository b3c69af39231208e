"""
Dispatch-and-pay orchestration.

Sends a message through the origin Mailbox, reads its message id from the
dispatch receipt, then quotes and pays the InterchainGasPaymaster so relayers
deliver it. Each step needs the previous step's output, so the steps run
strictly in order and any failure ends the run. A dispatch that succeeded
stays on chain even if the payment fails.
"""

import logging
from collections.abc import Callable

from web3.types import TxReceipt

from .abi import MAILBOX_DISPATCH, PAY_FOR_GAS, PAYMASTER_GAS, QUOTE_GAS_PAYMENT
from .config import SendConfig
from .errors import CredentialParseError, MissingReceiptError
from .keys import read_signing_key
from .message_id import extract_message_id
from .models import DispatchResult, GasQuote
from .utils.chain_client import ChainClient
from .utils.encoding import bytes32_to_hex

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., ChainClient]


def _progress(line: str) -> None:
    # Printed regardless of --log-level
    print(line)
    logger.debug(line)


class DispatchOrchestrator:
    """Runs one dispatch followed by one gas payment."""

    def __init__(self, config: SendConfig, client_factory: ClientFactory = ChainClient) -> None:
        """
        Initialize the orchestrator.

        Args:
            config: Send configuration
            client_factory: Builds a client from ``(rpc_url, secret=..., chain_id=...)``
        """
        self.config = config
        self.client_factory = client_factory

    def connect(self) -> tuple[ChainClient, str]:
        """
        Resolve the origin Mailbox and build a signing client for it.

        The key is bound to the origin domain id, which is the EVM chain id.

        Returns:
            Tuple of (signing client, mailbox address)

        Raises:
            CredentialParseError: If the key file is blank or holds no valid key
        """
        mailbox_address, rpc_url = self.config.origin.dispatch_address_and_rpc_url(self.config.url)
        secret = read_signing_key(self.config.private_key_path)
        if not secret.strip():
            raise CredentialParseError(f"Signing key {self.config.private_key_path} is empty")

        client = self.client_factory(
            rpc_url,
            secret=secret,
            chain_id=self.config.origin.domain_id,
        )
        logger.info(f"Connected to {self.config.origin} as {client.address}")
        return client, mailbox_address

    async def dispatch(self, client: ChainClient, mailbox_address: str) -> tuple[str, TxReceipt]:
        """
        Submit the message to the Mailbox and wait for it to be mined.

        Raises:
            MissingReceiptError: If no receipt comes back
        """
        tx_hash = client.send_transaction(
            mailbox_address,
            MAILBOX_DISPATCH,
            self.config.destination.domain_id,
            self.config.recipient_bytes32,
            self.config.message_body,
        )
        _progress(f"PENDING TRANSACTION HASH: {tx_hash}")

        receipt = client.wait_for_receipt(tx_hash)
        if receipt is None:
            raise MissingReceiptError(f"Something went wrong! No TX receipt for {tx_hash}")

        _progress("TRANSACTION SUBMITTED TO THE RELAYERS")
        return tx_hash, receipt

    async def quote(self, client: ChainClient, paymaster_address: str) -> GasQuote:
        """Ask the paymaster what delivering ``PAYMASTER_GAS`` gas to the destination costs."""
        destination = self.config.destination.domain_id
        amount = client.call(paymaster_address, QUOTE_GAS_PAYMENT, destination, PAYMASTER_GAS)

        quote = GasQuote(destination=destination, gas_amount=PAYMASTER_GAS, amount=int(amount))
        _progress(f"GAS PAYMENT QUOTE: {quote}")
        return quote

    async def pay(
        self,
        client: ChainClient,
        paymaster_address: str,
        message_id: bytes,
        quote: GasQuote,
    ) -> str:
        """
        Pay the quoted amount for the message, refunding any excess to the payer.

        Raises:
            MissingReceiptError: If the payment yields no receipt
        """
        tx_hash = client.send_transaction(
            paymaster_address,
            PAY_FOR_GAS,
            message_id,
            quote.destination,
            quote.gas_amount,
            client.address,
            value=quote.amount,
        )
        _progress(f"PENDING PAYMENT TRANSACTION HASH: {tx_hash}")

        if client.wait_for_receipt(tx_hash) is None:
            raise MissingReceiptError(f"Something went wrong! No TX receipt for payment {tx_hash}")

        _progress("PAYMENT SUCCEEDED, TRANSACTION IS BEING RELAYED TO THE RECIPIENT")
        return tx_hash

    async def send(self) -> DispatchResult:
        """
        Run the full dispatch-and-pay flow.

        Returns:
            Summary of both transactions
        """
        client, mailbox_address = self.connect()

        dispatch_tx_hash, receipt = await self.dispatch(client, mailbox_address)

        message_id = extract_message_id(receipt)
        _progress(f"MESSAGE ID: {bytes32_to_hex(message_id)}")

        paymaster_address = self.config.destination.paymaster_address()
        quote = await self.quote(client, paymaster_address)

        payment_tx_hash = await self.pay(client, paymaster_address, message_id, quote)

        return DispatchResult(
            dispatch_tx_hash=dispatch_tx_hash,
            message_id=message_id,
            quote=quote,
            payment_tx_hash=payment_tx_hash,
        )
