"""
Error taxonomy for the auction engine.

- PreconditionViolation: the operation was rejected before any state change
- ReentrancyViolation: a guarded operation was entered while another is in flight
- TransferFailure: an external value transfer did not go through (recoverable)
"""

from typing import Optional


class AuctionHouseError(Exception):
    """Base class for all engine errors."""


class PreconditionViolation(AuctionHouseError):
    """A precondition failed; nothing was mutated."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ReentrancyViolation(AuctionHouseError):
    """A guarded operation was re-entered."""

    def __init__(self, operation: Optional[str] = None):
        message = "Reentrant call"
        if operation:
            message = f"Reentrant call: {operation}"
        super().__init__(message)
        self.operation = operation


class TransferFailure(AuctionHouseError):
    """An external value transfer failed; bookkeeping was restored."""

    def __init__(self, recipient: str, amount: int, cause: str = ""):
        message = f"Transfer of {amount} to {recipient} failed"
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.recipient = recipient
        self.amount = amount
        self.cause = cause


__all__ = [
    "AuctionHouseError",
    "PreconditionViolation",
    "ReentrancyViolation",
    "TransferFailure",
]
