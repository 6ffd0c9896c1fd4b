"""
Reentrancy Guard - At most one value-moving operation in flight.

Withdrawal and settlement hand value to an external party whose
callback may try to re-enter the engine before the first call has
returned. The guard is a lock object owned by the engine instance:

    with engine.guard.hold("withdraw"):
        ...

A second acquisition while held raises ReentrancyViolation without
touching any state. Release happens on every exit path.
"""

import functools
from contextlib import contextmanager
from typing import Iterator, Optional

from auctionhouse.core.errors import ReentrancyViolation
from auctionhouse.utils.logger import get_logger

logger = get_logger("guard")


class ReentrancyGuard:
    """Non-reentrant scoped lock."""

    def __init__(self):
        self._locked = False
        self._holder: Optional[str] = None

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def holder(self) -> Optional[str]:
        """Name of the operation currently holding the guard."""
        return self._holder

    def acquire(self, operation: str = "") -> None:
        if self._locked:
            logger.warning(f"Reentrant call rejected: {operation or '?'} while {self._holder} in flight")
            raise ReentrancyViolation(operation or None)
        self._locked = True
        self._holder = operation or None

    def release(self) -> None:
        self._locked = False
        self._holder = None

    @contextmanager
    def hold(self, operation: str = "") -> Iterator[None]:
        """Hold the guard for the duration of the block."""
        self.acquire(operation)
        try:
            yield
        finally:
            self.release()


def nonreentrant(method):
    """
    Run a method under the instance's `guard` attribute.

    The wrapped object must expose a ReentrancyGuard as `self.guard`.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.guard.hold(method.__name__):
            return method(self, *args, **kwargs)

    return wrapper


__all__ = ["ReentrancyGuard", "nonreentrant"]
