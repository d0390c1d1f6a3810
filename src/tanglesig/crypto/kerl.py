"""
tanglesig/crypto/kerl.py

Kerl sponge: Keccak-384 driven over 243-trit blocks.

Each 243-trit block is read as a balanced ternary integer (last trit
forced to zero) and fed to Keccak as a 48-byte big-endian two's
complement value. Squeezing reverses the mapping and re-seeds the
Keccak state with the bitwise complement of the previous output.
"""

from typing import List, Sequence

from Crypto.Hash import keccak

from ..config import HASH_LENGTH, BYTE_HASH_LENGTH
from .converter import int_to_trits, trits_to_int

_MODULUS = 1 << (BYTE_HASH_LENGTH * 8)
_HALF = 1 << (BYTE_HASH_LENGTH * 8 - 1)


def trits_to_bytes(trits: Sequence[int]) -> bytes:
    """Encode one 243-trit block as 48 bytes (two's complement, big-endian)."""
    value = trits_to_int(trits)
    return (value % _MODULUS).to_bytes(BYTE_HASH_LENGTH, "big")


def bytes_to_trits(data: bytes) -> List[int]:
    """Decode 48 bytes into one 243-trit block."""
    value = int.from_bytes(data, "big")
    if value >= _HALF:
        value -= _MODULUS
    return int_to_trits(value, HASH_LENGTH)


class Kerl:
    """
    Sponge hash over trits.

    Example:
        kerl = Kerl()
        kerl.absorb(trits)
        digest = kerl.squeeze()
    """

    def __init__(self):
        self._keccak = keccak.new(digest_bits=384)

    def reset(self) -> None:
        """Discard all absorbed state."""
        self._keccak = keccak.new(digest_bits=384)

    def absorb(self, trits: Sequence[int]) -> None:
        """
        Absorb trits into the sponge.

        Args:
            trits: Trit sequence whose length is a multiple of 243

        Raises:
            ValueError: If the length is not a multiple of 243
        """
        if len(trits) % HASH_LENGTH:
            raise ValueError(
                f"Kerl absorbs multiples of {HASH_LENGTH} trits, got {len(trits)}"
            )

        for offset in range(0, len(trits), HASH_LENGTH):
            block = list(trits[offset:offset + HASH_LENGTH])
            block[-1] = 0
            self._keccak.update(trits_to_bytes(block))

    def squeeze(self, length: int = HASH_LENGTH) -> List[int]:
        """
        Squeeze trits out of the sponge.

        Args:
            length: Number of trits, a multiple of 243

        Returns:
            List of squeezed trits
        """
        if length % HASH_LENGTH:
            raise ValueError(
                f"Kerl squeezes multiples of {HASH_LENGTH} trits, got {length}"
            )

        out: List[int] = []
        for _ in range(length // HASH_LENGTH):
            digest = self._keccak.digest()
            block = bytes_to_trits(digest)
            block[-1] = 0
            out.extend(block)

            self._keccak = keccak.new(digest_bits=384)
            self._keccak.update(bytes(b ^ 0xFF for b in digest))

        return out


def kerl_hash(trits: Sequence[int], length: int = HASH_LENGTH) -> List[int]:
    """One-shot Kerl: absorb `trits` into a fresh sponge and squeeze `length`."""
    kerl = Kerl()
    kerl.absorb(trits)
    return kerl.squeeze(length)

