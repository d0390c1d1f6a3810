"""
tanglesig/crypto/converter.py

Balanced ternary conversion helpers.

A trit is one of -1, 0, 1. A tryte is three trits, written as one
character of TRYTE_ALPHABET ('9' is zero, 'A'..'M' are 1..13,
'N'..'Z' are -13..-1). Trit sequences are little-endian.
"""

import re
from typing import List, Optional, Sequence

from ..config import TRYTE_ALPHABET, FILLER

_TRYTES_RE = re.compile(r"^[9A-Z]*$")

# tryte character -> 3 trits, precomputed
_TRYTE_TRITS = {}
_TRITS_TRYTE = {}


def int_to_trits(value: int, length: Optional[int] = None) -> List[int]:
    """
    Convert an integer to balanced ternary.

    Args:
        value: Integer to convert (may be negative)
        length: Pad with zero trits to this length if given

    Returns:
        Little-endian list of trits
    """
    trits = []
    negative = value < 0
    quotient = abs(value)

    while quotient > 0:
        quotient, remainder = divmod(quotient, 3)
        if remainder == 2:
            remainder = -1
            quotient += 1
        trits.append(-remainder if negative else remainder)

    if length is not None:
        if len(trits) > length:
            raise ValueError(f"Value {value} does not fit in {length} trits")
        trits.extend([0] * (length - len(trits)))

    return trits


def trits_to_int(trits: Sequence[int]) -> int:
    """Convert little-endian balanced ternary to an integer."""
    value = 0
    for trit in reversed(trits):
        value = value * 3 + trit
    return value


for _index, _char in enumerate(TRYTE_ALPHABET):
    _value = _index if _index <= 13 else _index - 27
    _trits = tuple(int_to_trits(_value, 3))
    _TRYTE_TRITS[_char] = _trits
    _TRITS_TRYTE[_trits] = _char


def trytes_to_trits(trytes: str) -> List[int]:
    """
    Convert a tryte string to trits.

    Raises:
        ValueError: If the string contains non-tryte characters
    """
    trits: List[int] = []
    for char in trytes:
        try:
            trits.extend(_TRYTE_TRITS[char])
        except KeyError:
            raise ValueError(f"Invalid tryte character: {char!r}")
    return trits


def trits_to_trytes(trits: Sequence[int]) -> str:
    """
    Convert trits to a tryte string.

    Raises:
        ValueError: If the trit count is not a multiple of 3
    """
    if len(trits) % 3:
        raise ValueError(f"Trit count must be a multiple of 3, got {len(trits)}")
    return "".join(
        _TRITS_TRYTE[tuple(trits[i:i + 3])] for i in range(0, len(trits), 3)
    )


def tryte_value(char: str) -> int:
    """Integer value (-13..13) of a single tryte character."""
    return trits_to_int(_TRYTE_TRITS[char])


def int_to_trytes(value: int, length: int) -> str:
    """Encode an integer as `length` trytes."""
    return trits_to_trytes(int_to_trits(value, length * 3))


def increment_trits(trits: Sequence[int]) -> List[int]:
    """
    Add one to a fixed-width balanced ternary number.

    Overflow wraps around silently, as the ledger expects.
    """
    result = list(trits)
    for i in range(len(result)):
        result[i] += 1
        if result[i] > 1:
            result[i] = -1
        else:
            break
    return result


def is_trytes(value, length: Optional[int] = None) -> bool:
    """Check that value is a tryte string, optionally of an exact length."""
    if not isinstance(value, str):
        return False
    if length is not None and len(value) != length:
        return False
    return bool(_TRYTES_RE.match(value))


def is_filler(value: str) -> bool:
    """True if value is non-empty and consists only of the filler symbol."""
    return bool(value) and value.strip(FILLER) == ""


def pad_trytes(trytes: str, length: int) -> str:
    """Right-pad trytes with filler to exactly `length`."""
    return trytes + FILLER * (length - len(trytes))
