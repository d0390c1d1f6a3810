"""
tanglesig/multisig/api.py

Multisig facade: one object bundling address, assembly and signing
operations around a balance client.
"""

from typing import Any, Dict, Optional, Sequence, TYPE_CHECKING, Union

from ..bundle import Bundle
from ..errors import ValidationError
from . import signer
from .address import MultisigAddressBuilder, validate_address
from .transfer import Transfer, TransferAssembler

if TYPE_CHECKING:
    from ..node.client import NodeClient


class Multisig:
    """
    Entry point for multisig wallets.

    Example:
        multisig = Multisig(client)

        digest_a = multisig.get_digest(seed_a, 0, 3)
        digest_b = multisig.get_digest(seed_b, 0, 3)
        address = multisig.address([digest_a, digest_b]).finalize()

        bundle = multisig.initiate_transfer(6, address, remainder, transfers)
        bundle = multisig.add_signature(bundle, address, multisig.get_key(seed_a, 0, 3))
        bundle = multisig.add_signature(bundle, address, multisig.get_key(seed_b, 0, 3))
        assert multisig.validate_signatures(bundle, address)
    """

    address = MultisigAddressBuilder

    def __init__(self, client: Optional["NodeClient"] = None):
        """
        Initialize the facade.

        Args:
            client: Balance client; only needed for initiate_transfer()
        """
        self.client = client

    @staticmethod
    def get_key(seed: str, index: int, security: int) -> str:
        return signer.get_key(seed, index, security)

    @staticmethod
    def get_digest(seed: str, index: int, security: int) -> str:
        return signer.get_digest(seed, index, security)

    @staticmethod
    def validate_address(multisig_address: str, digests: Sequence[str]) -> bool:
        return validate_address(multisig_address, digests)

    def initiate_transfer(
        self,
        security_sum: int,
        input_address: str,
        remainder_address: Optional[str],
        transfers: Sequence[Union[Transfer, Dict[str, Any]]],
    ) -> Bundle:
        """Build the unsigned bundle; see TransferAssembler.initiate_transfer()."""
        if self.client is None:
            raise ValidationError("A balance client is required to initiate transfers")
        assembler = TransferAssembler(self.client)
        return assembler.initiate_transfer(
            security_sum, input_address, remainder_address, transfers
        )

    @staticmethod
    def add_signature(bundle: Bundle, input_address: str, key: str) -> Bundle:
        return signer.add_signature(bundle, input_address, key)

    @staticmethod
    def validate_signatures(bundle: Bundle, input_address: str) -> bool:
        return signer.validate_bundle_signatures(bundle, input_address)
