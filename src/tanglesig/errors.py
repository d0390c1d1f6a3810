"""
tanglesig/errors.py

Exceptions raised by the multisig transaction engine.
"""


class TangleSigError(Exception):
    """Base class for all tanglesig errors."""
    pass


class ValidationError(TangleSigError):
    """Malformed transfers, addresses, values or signing keys."""
    pass


class InsufficientFundsError(TangleSigError):
    """Requested total exceeds the confirmed balance of the input."""

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Not enough balance: need {required}, have {available}"
        )


class MissingRemainderAddressError(TangleSigError):
    """Input has surplus funds but no remainder address was supplied."""

    def __init__(self, remainder: int):
        self.remainder = remainder
        super().__init__(
            f"No remainder address defined for remainder of {remainder}"
        )


class NoSignatureRequiredError(TangleSigError):
    """Zero-value transfer sent through the multisig protocol."""
    pass


class TransportError(TangleSigError):
    """Balance query to the ledger node failed."""
    pass
