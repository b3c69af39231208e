"""
Contract methods and protocol constants used by the CLI.

Each ``ContractMethod`` names the ABI file it lives in, the method name, its
argument types and its return type, so calls are described as data instead
of generated bindings.
"""

from dataclasses import dataclass

from web3 import Web3

MAILBOX_ABI = "Mailbox"
GAS_PAYMASTER_ABI = "InterchainGasPaymaster"

# Gas the recipient consumes on the destination chain when handling a message.
# https://docs.hyperlane.xyz/docs/build-with-hyperlane/guides/paying-for-interchain-gas
PAYMASTER_GAS: int = 100_000

DISPATCH_EVENT = "Dispatch"
DISPATCH_ID_EVENT = "DispatchId"
DISPATCH_ID_SIGNATURE = "DispatchId(bytes32)"
DISPATCH_ID_TOPIC: bytes = bytes(Web3.keccak(text=DISPATCH_ID_SIGNATURE))


@dataclass(frozen=True, slots=True)
class ContractMethod:
    """An ABI method with its argument and return types.

    Attributes:
        abi_name: Name of the ABI file under ``contracts/`` (without .json)
        name: Solidity method name
        input_types: Solidity types of the positional arguments
        output_type: Solidity type of the return value, None when void
        payable: Whether the method accepts a native value
    """
    abi_name: str
    name: str
    input_types: tuple[str, ...]
    output_type: str | None = None
    payable: bool = False

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    def check_args(self, args: tuple) -> None:
        if len(args) != len(self.input_types):
            raise TypeError(
                f"{self.signature} takes {len(self.input_types)} arguments, got {len(args)}"
            )


MAILBOX_DISPATCH = ContractMethod(
    abi_name=MAILBOX_ABI,
    name="dispatch",
    input_types=("uint32", "bytes32", "bytes"),
    output_type="bytes32",
)

QUOTE_GAS_PAYMENT = ContractMethod(
    abi_name=GAS_PAYMASTER_ABI,
    name="quoteGasPayment",
    input_types=("uint32", "uint256"),
    output_type="uint256",
)

PAY_FOR_GAS = ContractMethod(
    abi_name=GAS_PAYMASTER_ABI,
    name="payForGas",
    input_types=("bytes32", "uint32", "uint256", "address"),
    payable=True,
)
