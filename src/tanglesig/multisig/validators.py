"""
tanglesig/multisig/validators.py

Input validation predicates for multisig transfers.
"""

from typing import Any, Sequence

from ..config import (
    ADDRESS_CHECKSUM_LENGTH,
    ADDRESS_LENGTH,
    FRAGMENT_LENGTH,
    SECURITY_LEVELS,
    TAG_LENGTH,
)
from ..crypto.converter import is_trytes


def is_address(value: Any) -> bool:
    """81-tryte address, or 90 trytes with checksum."""
    return (
        is_trytes(value, ADDRESS_LENGTH)
        or is_trytes(value, ADDRESS_LENGTH + ADDRESS_CHECKSUM_LENGTH)
    )


def is_value(value: Any) -> bool:
    """Integer amount; bools are rejected."""
    return isinstance(value, int) and not isinstance(value, bool)


def is_security_sum(value: Any) -> bool:
    return is_value(value) and value >= 1


def is_security_level(value: Any) -> bool:
    return is_value(value) and value in SECURITY_LEVELS


def is_tag(value: Any) -> bool:
    return is_trytes(value) and len(value) <= TAG_LENGTH


def is_key(value: Any) -> bool:
    """Private key trytes: one to three 2187-tryte blocks."""
    if not is_trytes(value) or not value:
        return False
    blocks, rest = divmod(len(value), FRAGMENT_LENGTH)
    return rest == 0 and blocks in SECURITY_LEVELS


def is_transfers_array(transfers: Sequence[Any]) -> bool:
    """
    Check a list of transfers.

    Each transfer needs a valid address, a non-negative integer value, a tryte
    message and a tag of at most 27 trytes.
    """
    if not isinstance(transfers, (list, tuple)) or not transfers:
        return False

    for transfer in transfers:
        if not is_address(getattr(transfer, "address", None)):
            return False
        value = getattr(transfer, "value", None)
        if not is_value(value) or value < 0:
            return False
        if not is_trytes(getattr(transfer, "message", None)):
            return False
        if not is_tag(getattr(transfer, "tag", None)):
            return False

    return True
