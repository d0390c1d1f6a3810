"""
tanglesig/multisig/address.py

Multisig address derivation and validation.

A multisig address is Kerl over every cosigner digest, absorbed in the
agreed cosigner order. The order is part of the address: the same
digests in a different order give a different address.

Usage:
    from tanglesig.multisig.address import MultisigAddressBuilder, validate_address

    builder = MultisigAddressBuilder()
    builder.absorb(alice_digest)
    builder.absorb(bob_digest)
    address = builder.finalize()

    assert validate_address(address, [alice_digest, bob_digest])
"""

import logging
from typing import Optional, Sequence, Union

from ..config import ADDRESS_CHECKSUM_LENGTH, ADDRESS_LENGTH, HASH_LENGTH
from ..crypto.converter import trits_to_trytes, trytes_to_trits
from ..crypto.kerl import Kerl, kerl_hash

logger = logging.getLogger("tanglesig.multisig.address")


def no_checksum(address: str) -> str:
    """Strip the checksum from an address, if present."""
    return address[:ADDRESS_LENGTH]


def add_checksum(address: str) -> str:
    """Append the 9-tryte checksum to an 81-tryte address."""
    address = no_checksum(address)
    checksum = trits_to_trytes(kerl_hash(trytes_to_trits(address)))
    return address + checksum[ADDRESS_LENGTH - ADDRESS_CHECKSUM_LENGTH:]


class MultisigAddressBuilder:
    """
    Incrementally builds a multisig address from cosigner digests.

    Cosigners may absorb their digests one at a time; the address is
    squeezed once by finalize().
    """

    def __init__(self, digests: Optional[Union[str, Sequence[str]]] = None):
        """
        Initialize the builder.

        Args:
            digests: Optional digest or ordered digests to absorb right away
        """
        self._kerl = Kerl()
        self._finalized = False
        self._count = 0

        if digests:
            self.absorb(digests)

    @property
    def digest_count(self) -> int:
        """Number of digest strings absorbed so far."""
        return self._count

    def absorb(self, digests: Union[str, Sequence[str]]) -> "MultisigAddressBuilder":
        """
        Absorb one digest or a list of digests, in order.

        Raises:
            ValueError: If the address was already finalized, or a digest is malformed
        """
        if self._finalized:
            raise ValueError("Address already finalized")

        if isinstance(digests, str):
            digests = [digests]

        for digest in digests:
            self._kerl.absorb(trytes_to_trits(digest))
            self._count += 1

        return self

    def finalize(self, digest: Optional[str] = None) -> str:
        """
        Squeeze the address.

        Args:
            digest: Optional last digest to absorb first

        Returns:
            81-tryte multisig address
        """
        if digest:
            self.absorb(digest)
        if self._finalized:
            raise ValueError("Address already finalized")

        self._finalized = True
        address = trits_to_trytes(self._kerl.squeeze(HASH_LENGTH))
        logger.debug(f"Derived multisig address {address} from {self._count} digest(s)")
        return address


def derive_address(ordered_digests: Sequence[str]) -> str:
    """
    Derive the multisig address for an ordered list of digests.

    Pure function of the digests and their order.
    """
    return MultisigAddressBuilder(list(ordered_digests)).finalize()


def validate_address(candidate_address: str, ordered_digests: Sequence[str]) -> bool:
    """
    Check a claimed multisig address against ordered digests.

    A checksummed candidate must also carry the correct checksum.

    Returns:
        True on an exact match
    """
    derived = derive_address(ordered_digests)
    if len(candidate_address) == ADDRESS_LENGTH + ADDRESS_CHECKSUM_LENGTH:
        return add_checksum(derived) == candidate_address
    return derived == candidate_address
