"""
tanglesig/multisig/signer.py

Cosigner signature aggregation.

Each cosigner calls add_signature() once with their private key, in the
same order their digests were absorbed into the multisig address. Every
key block signs one third of the normalized bundle hash; the third is
chosen by rotation, (signed entries so far + block index) % 3, so the
signature fragments of the input, read in bundle order, use thirds
0, 1, 2, 0, 1, 2, ... no matter how the security levels are split
among cosigners.

Flow:
1. Initiator builds the unsigned bundle (TransferAssembler)
2. Cosigner A: bundle = add_signature(bundle, address, key_a)
3. Cosigner B: bundle = add_signature(bundle, address, key_b)
4. Anyone: validate_bundle_signatures(bundle, address) before broadcast
"""

import logging
from typing import Dict, List

from ..bundle import Bundle
from ..config import KEY_FRAGMENT_TRITS, KEY_FRAGMENT_TRYTES, NORMALIZED_FRAGMENT_COUNT
from ..crypto import signing
from ..crypto.converter import trits_to_trytes, trytes_to_trits
from ..errors import ValidationError
from . import validators
from .address import no_checksum

logger = logging.getLogger("tanglesig.multisig.signer")


# ============================================================================
# KEY HELPERS
# ============================================================================

def _check_security(security: int) -> None:
    if not validators.is_security_level(security):
        raise ValidationError(f"Invalid security level: {security!r}")


def get_key(seed: str, index: int, security: int) -> str:
    """
    Get the private key trytes for one cosigner address.

    Args:
        seed: 81-tryte seed
        index: Key index
        security: Security level, 1 to 3

    Returns:
        security * 2187 key trytes
    """
    _check_security(security)
    return trits_to_trytes(signing.key(trytes_to_trits(seed), index, security))


def get_digest(seed: str, index: int, security: int) -> str:
    """
    Get the digest trytes a cosigner contributes to the multisig address.

    Returns:
        security * 81 digest trytes
    """
    _check_security(security)
    private_key = signing.key(trytes_to_trits(seed), index, security)
    return trits_to_trytes(signing.digests(private_key))


# ============================================================================
# SIGNING
# ============================================================================

def add_signature(bundle: Bundle, input_address: str, key: str) -> Bundle:
    """
    Add one cosigner's signature fragments to a bundle.

    Finds the first unsigned entry of input_address and writes one
    signature fragment per key block there and in the following
    entries. Returns the same bundle unchanged when every entry of the
    address is already signed or none carries it.

    Args:
        bundle: Finalized bundle snapshot
        input_address: Multisig input address
        key: Cosigner private key trytes

    Returns:
        New bundle snapshot with the signatures added

    Raises:
        ValidationError: Unfinalized bundle, a hash that does not match
            the entries, malformed key, or a key with more blocks than
            unsigned entries left for the address
    """
    if not bundle.finalized:
        raise ValidationError("Bundle must be finalized before signing")
    if not validators.is_key(key):
        raise ValidationError(
            f"Invalid private key: length {len(key) if isinstance(key, str) else '?'} "
            f"is not 1 to 3 blocks of {KEY_FRAGMENT_TRYTES} trytes"
        )
    if not bundle.verify_hash():
        raise ValidationError(
            f"Bundle hash {bundle.hash} does not match the bundle entries"
        )

    input_address = no_checksum(input_address)
    security = len(key) // KEY_FRAGMENT_TRYTES

    num_signed = 0
    for i, entry in enumerate(bundle):
        if entry.address != input_address:
            continue
        if entry.is_signed:
            num_signed += 1
            continue
        if not entry.is_unsigned:
            continue

        last = i + security - 1
        if last >= len(bundle) or any(
            bundle[k].address != input_address or not bundle[k].is_unsigned
            for k in range(i, last + 1)
        ):
            raise ValidationError(
                f"Key of security {security} does not fit the unsigned entries "
                f"of {input_address} starting at index {i}"
            )

        key_trits = trytes_to_trits(key)
        fragments = signing.normalized_fragments(bundle.hash)

        signed: Dict[int, str] = {}
        used: List[int] = []
        for j in range(security):
            fragment_index = (num_signed + j) % NORMALIZED_FRAGMENT_COUNT
            key_block = key_trits[j * KEY_FRAGMENT_TRITS:(j + 1) * KEY_FRAGMENT_TRITS]
            signature = signing.signature_fragment(fragments[fragment_index], key_block)
            signed[i + j] = trits_to_trytes(signature)
            used.append(fragment_index)

        logger.info(
            f"Signed entries {i}..{last} of bundle {bundle.hash} "
            f"(hash fragments {used}, {num_signed} previously signed)"
        )
        return bundle.with_signature_fragments(signed)

    logger.debug(f"No unsigned entries for {input_address} in bundle {bundle.hash}")
    return bundle


# ============================================================================
# VERIFICATION
# ============================================================================

def is_fully_signed(bundle: Bundle, address: str) -> bool:
    """True if the address has entries and all of them are signed."""
    entries = bundle.entries_for(no_checksum(address))
    return bool(entries) and all(entry.is_signed for entry in entries)


def validate_bundle_signatures(bundle: Bundle, address: str) -> bool:
    """
    Verify the aggregated signatures for an input address.

    Recomputes every key block digest from the signature fragments in
    bundle order and checks they hash to the multisig address.

    Returns:
        True if the bundle is fully signed for the address and valid
    """
    address = no_checksum(address)
    if not bundle.verify_hash() or not is_fully_signed(bundle, address):
        return False

    fragments = [entry.signature_message_fragment for entry in bundle.entries_for(address)]
    return signing.validate_signatures(address, fragments, bundle.hash)
