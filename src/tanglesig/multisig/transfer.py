"""
tanglesig/multisig/transfer.py

Transfer assembly: turns desired transfers plus a multisig funding
address into an unsigned, value-balanced bundle.

Bundle layout produced by initiate_transfer():

    [outputs ...][input x security_sum][remainder]

- An output whose message needs k fragments occupies k entries; the
  first carries the value, the rest zero. Fragment i of the message is
  attached to entry i of that output after finalization.
- The input occupies security_sum entries (first: -balance, rest: 0),
  one per key block of every cosigner, left as filler for signing.
- The remainder entry, if any, returns the surplus to the remainder
  address.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, TYPE_CHECKING, Union

from ..bundle import Bundle
from ..config import BALANCE_THRESHOLD, EMPTY_FRAGMENT, FRAGMENT_LENGTH, TAG_LENGTH
from ..crypto.converter import pad_trytes
from ..errors import (
    InsufficientFundsError,
    MissingRemainderAddressError,
    NoSignatureRequiredError,
    TransportError,
    ValidationError,
)
from . import validators
from .address import no_checksum

if TYPE_CHECKING:
    from ..node.client import NodeClient

logger = logging.getLogger("tanglesig.multisig.transfer")


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass
class Transfer:
    """A desired output of a multisig transfer."""
    address: str
    value: int
    message: str = ""
    tag: str = ""

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "value": self.value,
            "message": self.message,
            "tag": self.tag,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transfer":
        return cls(
            address=data["address"],
            value=data["value"],
            message=data.get("message") or "",
            tag=data.get("tag") or "",
        )


def split_message(message: str) -> List[str]:
    """
    Split a tryte message into filler-padded fragments.

    An empty message gives exactly one all-filler fragment.

    Returns:
        List of FRAGMENT_LENGTH-tryte fragments
    """
    if not message:
        return [EMPTY_FRAGMENT]

    return [
        pad_trytes(message[i:i + FRAGMENT_LENGTH], FRAGMENT_LENGTH)
        for i in range(0, len(message), FRAGMENT_LENGTH)
    ]


# ============================================================================
# TRANSFER ASSEMBLER
# ============================================================================

class TransferAssembler:
    """
    Builds unsigned multisig bundles.

    The balance client only needs a get_balances(addresses, threshold)
    method returning {"balances": [...]}; NodeClient provides one.

    Example:
        from tanglesig.node import NodeClient

        client = NodeClient()
        client.connect()

        assembler = TransferAssembler(client)
        bundle = assembler.initiate_transfer(
            security_sum=6,
            input_address=multisig_address,
            remainder_address=next_multisig_address,
            transfers=[Transfer(address=recipient, value=50)],
        )
        # Pass bundle to the first cosigner for add_signature()
    """

    def __init__(
        self,
        balance_client: "NodeClient",
        threshold: int = BALANCE_THRESHOLD,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the assembler.

        Args:
            balance_client: Collaborator answering balance queries
            threshold: Confirmation threshold sent with the balance query
            clock: Wall-clock source for entry timestamps
        """
        self.client = balance_client
        self.threshold = threshold
        self._clock = clock

    def initiate_transfer(
        self,
        security_sum: int,
        input_address: str,
        remainder_address: Optional[str],
        transfers: Sequence[Union[Transfer, Dict[str, Any]]],
    ) -> Bundle:
        """
        Prepare the unsigned bundle for a multisig transfer.

        Args:
            security_sum: Sum of security levels of all cosigners
            input_address: Multisig address funding the transfer
            remainder_address: Multisig address receiving any surplus
            transfers: Transfer objects or dicts with the same keys

        Returns:
            Finalized, unsigned Bundle

        Raises:
            ValidationError: Malformed transfers or addresses
            NoSignatureRequiredError: Total transfer value is zero
            InsufficientFundsError: Balance below the requested total
            MissingRemainderAddressError: Surplus with no remainder address
            TransportError: Balance query failed
        """
        transfers = self._normalize_transfers(transfers)
        self._validate(security_sum, input_address, remainder_address, transfers)

        input_address = no_checksum(input_address)
        if remainder_address:
            remainder_address = no_checksum(remainder_address)

        logger.info(f"Building multisig bundle for {len(transfers)} transfer(s)")

        bundle = Bundle()
        message_fragments: List[str] = []
        total_value = 0
        tag = pad_trytes("", TAG_LENGTH)

        for transfer in transfers:
            fragments = split_message(transfer.message)
            message_fragments.extend(fragments)

            tag = pad_trytes(transfer.tag, TAG_LENGTH)
            timestamp = int(self._clock())

            bundle = bundle.add_entry(
                len(fragments),
                transfer.address,
                transfer.value,
                tag,
                timestamp,
            )
            total_value += transfer.value

        if not total_value:
            raise NoSignatureRequiredError(
                "Invalid value transfer: the transfer does not require a signature."
            )

        balance = self._get_balance(input_address)
        timestamp = int(self._clock())

        if balance > 0:
            bundle = bundle.add_entry(security_sum, input_address, -balance, tag, timestamp)

        if total_value > balance:
            raise InsufficientFundsError(required=total_value, available=balance)

        if balance > total_value:
            remainder = balance - total_value
            if not remainder_address:
                raise MissingRemainderAddressError(remainder)
            bundle = bundle.add_entry(1, remainder_address, remainder, tag, timestamp)

        bundle = bundle.finalize().add_trytes(message_fragments)

        logger.info(
            f"Prepared bundle {bundle.hash} with {len(bundle)} entries "
            f"(value {total_value}, balance {balance})"
        )
        return bundle

    def _normalize_transfers(self, transfers) -> List[Transfer]:
        if not isinstance(transfers, (list, tuple)):
            raise ValidationError("Invalid transfers object")

        normalized = []
        for item in transfers:
            if isinstance(item, dict):
                try:
                    item = Transfer.from_dict(item)
                except KeyError as e:
                    raise ValidationError(f"Transfer is missing field {e}") from e
            elif not isinstance(item, Transfer):
                raise ValidationError(f"Invalid transfer: {item!r}")

            address = item.address
            if isinstance(address, str):
                address = no_checksum(address)
            normalized.append(Transfer(
                address=address,
                value=item.value,
                message=item.message or "",
                tag=item.tag or "",
            ))
        return normalized

    def _validate(
        self,
        security_sum: int,
        input_address: str,
        remainder_address: Optional[str],
        transfers: List[Transfer],
    ) -> None:
        if not validators.is_transfers_array(transfers):
            raise ValidationError("Invalid transfers object")
        if not validators.is_security_sum(security_sum):
            raise ValidationError(f"Invalid security sum: {security_sum!r}")
        if not validators.is_address(input_address):
            raise ValidationError(f"Invalid input address: {input_address!r}")
        if remainder_address and not validators.is_address(remainder_address):
            raise ValidationError(f"Invalid remainder address: {remainder_address!r}")

    def _get_balance(self, address: str) -> int:
        response = self.client.get_balances([address], self.threshold)
        try:
            return int(response["balances"][0])
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise TransportError(f"Malformed balance response: {response!r}") from e
