"""
tanglesig - Multisig transfers for Kerl-based ternary ledgers

Cosigners derive one shared address from their key digests, an initiator
assembles an unsigned bundle spending from it, and each cosigner adds
their signature fragments in turn.

Usage:
    from tanglesig import Multisig, NodeClient, Transfer

    client = NodeClient()
    client.connect()
    multisig = Multisig(client)

    # Each cosigner shares their digest
    digest_a = multisig.get_digest(seed_a, 0, 3)
    digest_b = multisig.get_digest(seed_b, 0, 3)
    address = multisig.address([digest_a, digest_b]).finalize()

    # Initiator prepares the bundle
    bundle = multisig.initiate_transfer(
        security_sum=6,
        input_address=address,
        remainder_address=remainder,
        transfers=[Transfer(address=recipient, value=50)],
    )

    # Cosigners sign in address order
    bundle = multisig.add_signature(bundle, address, multisig.get_key(seed_a, 0, 3))
    bundle = multisig.add_signature(bundle, address, multisig.get_key(seed_b, 0, 3))
"""

from .bundle import Bundle, BundleEntry, FragmentState
from .errors import (
    TangleSigError,
    ValidationError,
    InsufficientFundsError,
    MissingRemainderAddressError,
    NoSignatureRequiredError,
    TransportError,
)
from .multisig import (
    Multisig,
    MultisigAddressBuilder,
    Transfer,
    TransferAssembler,
    add_signature,
    derive_address,
    validate_address,
    validate_bundle_signatures,
    is_fully_signed,
    get_key,
    get_digest,
)
from .node import NodeClient, NodeError

__version__ = "1.0.0"
__all__ = [
    # Bundle
    "Bundle",
    "BundleEntry",
    "FragmentState",
    # Errors
    "TangleSigError",
    "ValidationError",
    "InsufficientFundsError",
    "MissingRemainderAddressError",
    "NoSignatureRequiredError",
    "TransportError",
    # Multisig
    "Multisig",
    "MultisigAddressBuilder",
    "Transfer",
    "TransferAssembler",
    "add_signature",
    "derive_address",
    "validate_address",
    "validate_bundle_signatures",
    "is_fully_signed",
    "get_key",
    "get_digest",
    # Node
    "NodeClient",
    "NodeError",
]
