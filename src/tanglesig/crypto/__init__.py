"""
tanglesig/crypto/

Hash and one-time signature primitives consumed by the multisig engine:
ternary conversion, the Kerl sponge, and Kerl-based key derivation and
signing.
"""

from .kerl import Kerl, kerl_hash
from .converter import (
    trytes_to_trits,
    trits_to_trytes,
    int_to_trits,
    trits_to_int,
    int_to_trytes,
    is_trytes,
    is_filler,
)
from . import signing

__all__ = [
    "Kerl",
    "kerl_hash",
    "trytes_to_trits",
    "trits_to_trytes",
    "int_to_trits",
    "trits_to_int",
    "int_to_trytes",
    "is_trytes",
    "is_filler",
    "signing",
]
