"""
tanglesig/multisig/

Multisig transaction engine: shared address derivation, transfer
assembly and cosigner signature aggregation.
"""

from .address import (
    MultisigAddressBuilder,
    derive_address,
    validate_address,
    add_checksum,
    no_checksum,
)
from .transfer import (
    Transfer,
    TransferAssembler,
    split_message,
)
from .signer import (
    add_signature,
    get_key,
    get_digest,
    is_fully_signed,
    validate_bundle_signatures,
)
from .api import Multisig

__all__ = [
    # Address
    "MultisigAddressBuilder",
    "derive_address",
    "validate_address",
    "add_checksum",
    "no_checksum",
    # Transfer assembly
    "Transfer",
    "TransferAssembler",
    "split_message",
    # Signing
    "add_signature",
    "get_key",
    "get_digest",
    "is_fully_signed",
    "validate_bundle_signatures",
    # Facade
    "Multisig",
]
