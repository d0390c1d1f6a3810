"""
tanglesig/crypto/signing.py

Winternitz one-time signature primitives over Kerl.

A private key of security level `s` is `s` key blocks of 27 chunks,
each chunk 243 trits. Signing a chunk hashes it `13 - n` times, where
`n` is the matching value of the normalized message hash; verifying
hashes the signature chunk another `13 + n` times, reaching the digest
side of the chain. A key block must never sign two different normalized
hashes, which is what the multisig rotation rule protects.

Usage:
    from tanglesig.crypto import signing

    private_key = signing.key(seed_trits, index=0, security=2)
    key_digests = signing.digests(private_key)
    addr = signing.address(key_digests)
"""

from typing import List, Sequence

from ..config import (
    ADDRESS_LENGTH,
    HASH_LENGTH,
    KEY_FRAGMENT_CHUNKS,
    KEY_FRAGMENT_TRITS,
    NORMALIZED_FRAGMENT_COUNT,
    NORMALIZED_FRAGMENT_LENGTH,
    MAX_TRYTE_VALUE,
    MIN_TRYTE_VALUE,
    SECURITY_LEVELS,
)
from .converter import increment_trits, tryte_value, trits_to_trytes, trytes_to_trits
from .kerl import Kerl, kerl_hash


def _hash_chain(chunk: Sequence[int], rounds: int) -> List[int]:
    buffer = list(chunk)
    for _ in range(rounds):
        buffer = kerl_hash(buffer)
    return buffer


def key(seed: Sequence[int], index: int, security: int) -> List[int]:
    """
    Derive the private key for one address of a seed.

    Args:
        seed: Seed trits
        index: Key index (non-negative)
        security: Security level, 1 to 3

    Returns:
        security * 6561 key trits
    """
    if security not in SECURITY_LEVELS:
        raise ValueError(f"Invalid security level: {security}")
    if index < 0:
        raise ValueError(f"Invalid key index: {index}")

    subseed = list(seed)
    if len(subseed) % HASH_LENGTH:
        subseed.extend([0] * (HASH_LENGTH - len(subseed) % HASH_LENGTH))

    for _ in range(index):
        subseed = increment_trits(subseed)

    kerl = Kerl()
    kerl.absorb(subseed)
    subseed = kerl.squeeze(len(subseed))

    kerl = Kerl()
    kerl.absorb(subseed)

    out: List[int] = []
    for _ in range(security * KEY_FRAGMENT_CHUNKS):
        out.extend(kerl.squeeze(HASH_LENGTH))
    return out


def digests(private_key: Sequence[int]) -> List[int]:
    """
    Compute the public digest of every key block.

    Returns:
        243 trits per key block, concatenated in block order
    """
    out: List[int] = []
    for block_start in range(0, len(private_key) - KEY_FRAGMENT_TRITS + 1, KEY_FRAGMENT_TRITS):
        block: List[int] = []
        for chunk_start in range(block_start, block_start + KEY_FRAGMENT_TRITS, HASH_LENGTH):
            chunk = private_key[chunk_start:chunk_start + HASH_LENGTH]
            block.extend(_hash_chain(chunk, MAX_TRYTE_VALUE * 2))
        out.extend(kerl_hash(block))
    return out


def address(digest_trits: Sequence[int]) -> List[int]:
    """Hash concatenated digests into a 243-trit address."""
    return kerl_hash(digest_trits)


def normalized_bundle(bundle_hash: str) -> List[int]:
    """
    Normalize an 81-tryte bundle hash.

    Each 27-tryte third is shifted tryte by tryte until its values sum
    to zero, so every sub-fragment reveals the same amount of key chain.

    Returns:
        81 integers in [-13, 13]
    """
    normalized = [tryte_value(c) for c in bundle_hash]

    for i in range(NORMALIZED_FRAGMENT_COUNT):
        start = i * NORMALIZED_FRAGMENT_LENGTH
        end = start + NORMALIZED_FRAGMENT_LENGTH
        total = sum(normalized[start:end])

        while total > 0:
            for j in range(start, end):
                if normalized[j] > MIN_TRYTE_VALUE:
                    normalized[j] -= 1
                    total -= 1
                    break

        while total < 0:
            for j in range(start, end):
                if normalized[j] < MAX_TRYTE_VALUE:
                    normalized[j] += 1
                    total += 1
                    break

    return normalized


def normalized_fragments(bundle_hash: str) -> List[List[int]]:
    """Normalized bundle hash split into its 3 sub-fragments."""
    normalized = normalized_bundle(bundle_hash)
    return [
        normalized[i * NORMALIZED_FRAGMENT_LENGTH:(i + 1) * NORMALIZED_FRAGMENT_LENGTH]
        for i in range(NORMALIZED_FRAGMENT_COUNT)
    ]


def signature_fragment(
    normalized_fragment: Sequence[int],
    key_fragment: Sequence[int],
) -> List[int]:
    """
    Sign one normalized sub-fragment with one key block.

    Args:
        normalized_fragment: 27 normalized hash values
        key_fragment: 6561 key trits

    Returns:
        6561 signature trits
    """
    if len(key_fragment) != KEY_FRAGMENT_TRITS:
        raise ValueError(
            f"Key fragment must be {KEY_FRAGMENT_TRITS} trits, got {len(key_fragment)}"
        )

    out: List[int] = []
    for i in range(KEY_FRAGMENT_CHUNKS):
        chunk = key_fragment[i * HASH_LENGTH:(i + 1) * HASH_LENGTH]
        out.extend(_hash_chain(chunk, MAX_TRYTE_VALUE - normalized_fragment[i]))
    return out


def digest(
    normalized_fragment: Sequence[int],
    signature: Sequence[int],
) -> List[int]:
    """Recover the key block digest from a signature fragment."""
    kerl = Kerl()
    for i in range(KEY_FRAGMENT_CHUNKS):
        chunk = signature[i * HASH_LENGTH:(i + 1) * HASH_LENGTH]
        kerl.absorb(_hash_chain(chunk, normalized_fragment[i] + MAX_TRYTE_VALUE))
    return kerl.squeeze(HASH_LENGTH)


def validate_signatures(
    expected_address: str,
    signature_fragments: Sequence[str],
    bundle_hash: str,
) -> bool:
    """
    Check that signature fragments, in order, resolve to an address.

    The i-th fragment is checked against normalized sub-fragment i % 3.

    Args:
        expected_address: 81-tryte address
        signature_fragments: 2187-tryte signature fragments
        bundle_hash: 81-tryte bundle hash that was signed

    Returns:
        True if the recovered address matches
    """
    fragments = normalized_fragments(bundle_hash)

    kerl = Kerl()
    for i, fragment in enumerate(signature_fragments):
        kerl.absorb(digest(fragments[i % NORMALIZED_FRAGMENT_COUNT], trytes_to_trits(fragment)))

    return trits_to_trytes(kerl.squeeze(HASH_LENGTH)) == expected_address[:ADDRESS_LENGTH]
