"""
Escrow & Settlement - Paying value out of the engine.

Two ways value leaves:
- withdraw: an outbid bidder pulls their refund from escrow
- settle: after the deadline the auction ends and the winning bid is
  pushed to the owner

Both follow checks-effects-interactions under the reentrancy guard:
1. Check every precondition
2. Zero the balance being paid out
3. Ask the gateway to transfer
4. On failure put the balance back, so it stays claimable

A transfer failure is not an exception to the caller. It comes back as
a SettlementResult with success=False, together with a *_FAILED
notification.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from auctionhouse.core.auction.ledger import AuctionLedger
from auctionhouse.core.errors import PreconditionViolation, TransferFailure
from auctionhouse.core.events import EventBus, EventType
from auctionhouse.core.guard import ReentrancyGuard, nonreentrant
from auctionhouse.core.registry import IdentityRegistry
from auctionhouse.core.transfer import TransferGateway
from auctionhouse.utils.logger import get_logger

logger = get_logger("escrow")


@dataclass
class SettlementResult:
    """Result of a payout attempt."""
    success: bool
    auction_id: int
    recipient: str
    amount: int
    error: str = ""

    def raise_for_failure(self) -> None:
        """Turn a failed payout into a TransferFailure."""
        if not self.success:
            raise TransferFailure(self.recipient, self.amount, self.error)


class EscrowSettlement:
    """
    Withdrawal and settlement of auction funds.

    Every public operation runs under `guard`, which must be the same
    guard for all value-moving operations of one engine.
    """

    def __init__(
        self,
        ledger: AuctionLedger,
        registry: IdentityRegistry,
        gateway: TransferGateway,
        events: EventBus,
        guard: Optional[ReentrancyGuard] = None,
    ):
        self.ledger = ledger
        self.registry = registry
        self.gateway = gateway
        self.events = events
        self.guard = guard or ReentrancyGuard()

    # =========================================================================
    # Transfer
    # =========================================================================

    def _send(self, recipient: str, amount: int) -> Tuple[bool, str]:
        """
        Attempt one external transfer.

        Anything the gateway raises counts as a failed transfer.

        Returns:
            (success, error_message)
        """
        try:
            ok = self.gateway.transfer(recipient, amount)
        except Exception as exc:
            logger.warning(f"Transfer of {amount} to {recipient} raised {type(exc).__name__}: {exc}")
            return False, f"{type(exc).__name__}: {exc}"

        if not ok:
            logger.warning(f"Transfer of {amount} to {recipient} refused")
            return False, "Transfer refused"
        return True, ""

    # =========================================================================
    # Withdrawal
    # =========================================================================

    @nonreentrant
    def withdraw(self, auction_id: int, caller: str, now: Optional[int] = None) -> SettlementResult:
        """
        Pull the caller's refund out of escrow.

        Raises:
            PreconditionViolation: unregistered caller, unknown auction,
                or nothing to withdraw
            ReentrancyViolation: another payout is in flight
        """
        self.registry.get_user(caller)
        self.ledger.get(auction_id)

        if self.ledger.escrow_balance(auction_id, caller) <= 0:
            raise PreconditionViolation("Nothing to withdraw")

        amount = self.ledger.debit_escrow(auction_id, caller)

        ok, err = self._send(caller, amount)
        if not ok:
            self.ledger.credit_escrow(auction_id, caller, amount)
            self.events.emit(
                EventType.WITHDRAWAL_FAILED,
                timestamp=now,
                auction_id=auction_id,
                bidder=caller,
                amount=amount,
            )
            return SettlementResult(False, auction_id, caller, amount, err)

        logger.info(f"Withdrawal: auction #{auction_id} {caller} amount={amount}")
        self.events.emit(
            EventType.WITHDRAWAL_SUCCEEDED,
            timestamp=now,
            auction_id=auction_id,
            bidder=caller,
            amount=amount,
        )
        return SettlementResult(True, auction_id, caller, amount)

    # =========================================================================
    # Settlement
    # =========================================================================

    @nonreentrant
    def settle(self, auction_id: int, caller: str, now: int) -> SettlementResult:
        """
        End an auction whose deadline has passed and pay its owner.

        The auction moves to ENDED before the transfer is attempted and
        stays ENDED whatever the transfer outcome. The settlement is
        credited as a win to the caller when the auction had a bidder.

        Raises:
            PreconditionViolation: unregistered caller, unknown auction,
                already ended, or deadline not reached
            ReentrancyViolation: another payout is in flight
        """
        user = self.registry.get_user(caller)
        auction = self.ledger.get(auction_id)

        if auction.ended:
            raise PreconditionViolation("Auction already ended")

        if not auction.deadline_reached(now):
            raise PreconditionViolation(f"Deadline not reached: ends at {auction.end_time}")

        self.ledger.close(auction)
        if auction.winner is not None:
            user.record_win()

        logger.info(f"Auction #{auction_id} ended: winner={auction.winner} bid={auction.highest_bid}")
        return self._pay_owner(auction_id, auction.owner, now)

    @nonreentrant
    def retry_settlement(self, auction_id: int, caller: str, now: Optional[int] = None) -> SettlementResult:
        """
        Re-attempt an owner payout that failed during settlement.

        Raises:
            PreconditionViolation: unregistered caller, unknown auction,
                auction still open, caller is not the owner, or nothing owed
            ReentrancyViolation: another payout is in flight
        """
        self.registry.get_user(caller)
        auction = self.ledger.get(auction_id)

        if not auction.ended:
            raise PreconditionViolation("Auction not ended")

        if caller != auction.owner:
            raise PreconditionViolation("Only the auction owner can claim proceeds")

        if self.ledger.proceeds_owed(auction_id) <= 0:
            raise PreconditionViolation("No proceeds owed")

        return self._pay_owner(auction_id, auction.owner, now)

    def _pay_owner(self, auction_id: int, owner: str, now: Optional[int]) -> SettlementResult:
        amount = self.ledger.debit_proceeds(auction_id)

        # No bids: nothing to move
        if amount == 0:
            self.events.emit(
                EventType.SETTLEMENT_SUCCEEDED,
                timestamp=now,
                auction_id=auction_id,
                owner=owner,
                amount=0,
            )
            return SettlementResult(True, auction_id, owner, 0)

        ok, err = self._send(owner, amount)
        if not ok:
            self.ledger.credit_proceeds(auction_id, amount)
            self.events.emit(
                EventType.SETTLEMENT_FAILED,
                timestamp=now,
                auction_id=auction_id,
                owner=owner,
                amount=amount,
            )
            return SettlementResult(False, auction_id, owner, amount, err)

        logger.info(f"Proceeds paid: auction #{auction_id} {owner} amount={amount}")
        self.events.emit(
            EventType.SETTLEMENT_SUCCEEDED,
            timestamp=now,
            auction_id=auction_id,
            owner=owner,
            amount=amount,
        )
        return SettlementResult(True, auction_id, owner, amount)


__all__ = ["EscrowSettlement", "SettlementResult"]
