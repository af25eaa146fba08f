"""Error taxonomy for ledger interaction."""

from typing import Optional


class ConfigurationError(ValueError):
    """Raised when required inputs are missing or invalid before any network use."""


class LedgerError(RuntimeError):
    """Base class for failures reported by the ledger."""


class SubmissionError(LedgerError):
    """Raised when the ledger rejects a transaction before inclusion."""


class RevertError(LedgerError):
    """Raised when a transaction was included but its execution failed."""

    def __init__(self, message: str, receipt: Optional[object] = None) -> None:
        super().__init__(message)
        self.receipt = receipt


class ConfirmationTimeoutError(LedgerError, TimeoutError):
    """Raised when inclusion is not observed within the caller's bound."""

    def __init__(self, tx_hash: str, timeout: float) -> None:
        super().__init__(f"Transaction {tx_hash} not included within {timeout:g}s.")
        self.tx_hash = tx_hash
        self.timeout = timeout


class DecodeError(ValueError):
    """Raised inside the event decoder when a log cannot be decoded."""
