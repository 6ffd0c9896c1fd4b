"""
Value transfer to external parties.

The engine never moves value itself; it asks a gateway to pay a
recipient and gets back a single success/failure answer. A gateway may
also raise, or call back into the engine before returning (as a
recipient contract would). Both are treated by the caller as a failed
transfer.
"""

from collections import defaultdict
from typing import Callable, Dict, List, Optional, Protocol, Set, Tuple

from auctionhouse.utils.logger import get_logger

logger = get_logger("transfer")


class TransferGateway(Protocol):
    """Anything that can pay `amount` to `recipient`."""

    def transfer(self, recipient: str, amount: int) -> bool:
        ...


class InMemoryTransferGateway:
    """
    Gateway that records payouts in a dict.

    In production this would wrap a payment rail. For tests and the demo
    it supports:
    - failing transfers to selected recipients
    - an `on_transfer` hook invoked before the payout is booked, which is
      where a malicious recipient would try to re-enter the engine
    """

    def __init__(self):
        self.paid: Dict[str, int] = defaultdict(int)
        self.history: List[Tuple[str, int, bool]] = []
        self.failing: Set[str] = set()
        self.on_transfer: Optional[Callable[[str, int], None]] = None

    def fail_for(self, recipient: str) -> None:
        """Make every transfer to `recipient` fail."""
        self.failing.add(recipient)

    def recover(self, recipient: str) -> None:
        self.failing.discard(recipient)

    def transfer(self, recipient: str, amount: int) -> bool:
        if self.on_transfer is not None:
            self.on_transfer(recipient, amount)

        if recipient in self.failing:
            self.history.append((recipient, amount, False))
            logger.debug(f"Transfer refused: {recipient} amount={amount}")
            return False

        self.paid[recipient] += amount
        self.history.append((recipient, amount, True))
        return True

    def total_paid(self) -> int:
        return sum(self.paid.values())


__all__ = ["TransferGateway", "InMemoryTransferGateway"]
