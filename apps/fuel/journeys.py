"""
Journey queue manager: per-truck state machine over fuel ledgers.

    active ──(is_complete)──► completed
      ▲
    queued (queue_order 1..N, dense)

At most one ledger per truck is active; the partial unique constraint on
FuelLedger backs this up at the database. completed and cancelled are terminal.
"""

import logging

from django.utils import timezone

from .balance import DestinationClassifier, is_complete
from .models import FuelLedger
from .repository import LedgerRepository

logger = logging.getLogger("fleetledger.journeys")

Status = FuelLedger.JourneyStatus


class JourneyQueueManager:

    def __init__(self, ledgers=None, classifier=None):
        self.ledgers    = ledgers    or LedgerRepository()
        self.classifier = classifier or DestinationClassifier()

    # ── Placement ─────────────────────────────────────────────────────────────
    def place(self, ledger, force_queue=False):
        """
        Decide active vs queued for a ledger about to be written on its truck.
        A truck that already has an active ledger gets the new one queued behind it;
        otherwise the new ledger is active immediately. Does not save.
        """
        active = self.ledgers.active_for_truck(ledger.truck_no, for_update=True, exclude=ledger.pk)
        queued = self.ledgers.queued_for_truck(ledger.truck_no, for_update=True, exclude=ledger.pk)
        # No active journey means the newcomer drives now, even when ledgers are
        # still queued behind a cancelled or moved one; those wait for completion
        if active is None and not force_queue:
            ledger.journey_status = Status.ACTIVE
            ledger.queue_order    = None
            ledger.waiting_behind = None
            ledger.activated_at   = timezone.now()
            return ledger

        ledger.journey_status = Status.QUEUED
        ledger.queue_order    = len(queued) + 1
        ledger.waiting_behind = active
        ledger.activated_at   = None
        logger.info(
            "Truck %s already has an active journey, ledger %s queued at position %d",
            ledger.truck_no, ledger.id, ledger.queue_order,
        )
        return ledger

    # ── Completion ────────────────────────────────────────────────────────────
    def complete_if_done(self, ledger):
        """
        Run after every ledger mutation. Completes an active ledger whose journey
        is closed and promotes the next one in line. Returns the promoted ledger.
        """
        if ledger.journey_status != Status.ACTIVE or ledger.is_cancelled:
            return None
        if not is_complete(ledger, self.classifier):
            return None

        ledger.journey_status = Status.COMPLETED
        ledger.completed_at   = timezone.now()
        self.ledgers.save(ledger, ["journey_status", "completed_at"])
        logger.info("Journey %s for truck %s completed", ledger.going_do_number, ledger.truck_no)

        promoted = self.promote_next(ledger.truck_no)
        if promoted is not None:
            # Checkpoints may have been filled while it waited
            self.complete_if_done(promoted)
        return promoted

    def promote_next(self, truck_no):
        """Lowest queued ledger becomes active; the rest are renumbered 1..N behind it."""
        if self.ledgers.active_for_truck(truck_no, for_update=True) is not None:
            return None
        queued = self.ledgers.queued_for_truck(truck_no, for_update=True)
        if not queued:
            return None

        head, rest = queued[0], queued[1:]
        head.journey_status = Status.ACTIVE
        head.queue_order    = None
        head.waiting_behind = None
        head.activated_at   = timezone.now()
        self.ledgers.save(head, ["journey_status", "queue_order", "waiting_behind", "activated_at"])

        for position, ledger in enumerate(rest, start=1):
            ledger.queue_order    = position
            ledger.waiting_behind = head
            self.ledgers.save(ledger, ["queue_order", "waiting_behind"])

        logger.info(
            "Ledger %s promoted to active for truck %s (%d still queued)",
            head.id, truck_no, len(rest),
        )
        return head

    def renumber(self, truck_no):
        """Close gaps left when a queued ledger leaves the queue."""
        queued = self.ledgers.queued_for_truck(truck_no, for_update=True)
        for position, ledger in enumerate(queued, start=1):
            if ledger.queue_order != position:
                ledger.queue_order = position
                self.ledgers.save(ledger, ["queue_order"])
        return queued

    # ── Leaving the queue ─────────────────────────────────────────────────────
    def withdraw(self, ledger):
        """Mark a ledger cancelled and close the gap it leaves. Saves the queue fields."""
        was_queued = ledger.journey_status == Status.QUEUED
        ledger.journey_status = Status.CANCELLED
        ledger.queue_order    = None
        ledger.waiting_behind = None
        self.ledgers.save(ledger, ["journey_status", "queue_order", "waiting_behind"])
        if was_queued:
            self.renumber(ledger.truck_no)
        return ledger
