"""
LedgerService: writes to fuel ledgers.

Every write goes through `settle`: recompute the balance from the full
checkpoint set, re-evaluate the configuration lock, save, then run the
completion check (which may promote the next queued journey).
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from django.db import IntegrityError, transaction

from apps.notifications.locks import ConfigLockPolicy
from apps.notifications.service import NotificationDispatcher
from apps.orders.exceptions import FleetLedgerError, InvalidLedgerState, LedgerNotFound

from .balance import CHECKPOINT_FIELDS, recompute_balance
from .journeys import JourneyQueueManager
from .models import FuelLedger
from .repository import LedgerRepository, RouteConfigLookup, TruckBatchLookup
from .trucks import normalize_truck_no

logger = logging.getLogger("fleetledger.fuel")

UPDATABLE_FIELDS = ("total_liters", "extra_liters", *CHECKPOINT_FIELDS)


@dataclass
class LedgerChange:
    ledger: FuelLedger
    events: list = field(default_factory=list)
    promoted: Optional[FuelLedger] = None
    report: object = None


@dataclass
class TruckJourney:
    truck_no: str
    active: Optional[FuelLedger]
    queued: list


class LedgerService:
    """
    Fuel ledger orchestration.
    Dependencies are injected so they can be swapped in tests.
    """

    def __init__(
        self,
        ledgers=None,
        routes=None,
        batches=None,
        queue_manager=None,
        lock_policy=None,
        dispatcher=None,
    ):
        self.ledgers    = ledgers       or LedgerRepository()
        self.routes     = routes        or RouteConfigLookup()
        self.batches    = batches       or TruckBatchLookup()
        self.queue      = queue_manager or JourneyQueueManager(ledgers=self.ledgers)
        self.locks      = lock_policy   or ConfigLockPolicy()
        self.dispatcher = dispatcher    or NotificationDispatcher()

    # ── Opening a journey ─────────────────────────────────────────────────────
    def open_for_going_order(self, order, actor) -> LedgerChange:
        """
        New ledger for an IMPORT order. Totals come from route and truck-batch
        configuration; whichever is missing locks the ledger.
        """
        origin, destination = order.leg_endpoints()
        ledger = FuelLedger(
            truck_no        = order.truck_no,
            going_do_number = order.order_number,
            from_location   = origin,
            to_location     = destination,
            start_location  = origin,
            journey_date    = order.order_date,
            total_liters    = self.routes.volume_for(origin, destination),
            extra_liters    = self.batches.extra_for(order.truck_no),
            created_by      = actor.username,
        )
        recompute_balance(ledger)
        events = self.locks.apply(ledger, actor, order_number=order.order_number, destination=destination)
        self.queue.place(ledger)
        self._insert(ledger)
        logger.info(
            "Ledger %s opened for DO %s on truck %s [%s, balance %s]",
            ledger.id, order.order_number, ledger.truck_no, ledger.journey_status, ledger.balance,
        )
        return LedgerChange(ledger=ledger, events=events)

    def _insert(self, ledger):
        try:
            with transaction.atomic():
                ledger.save(force_insert=True)
        except IntegrityError:
            # Another request activated a ledger on this truck after we looked
            logger.warning("Truck %s gained an active journey concurrently, queueing %s", ledger.truck_no, ledger.id)
            self.queue.place(ledger, force_queue=True)
            ledger.save(force_insert=True)
        return ledger

    # ── Every write ends here ─────────────────────────────────────────────────
    def settle(self, ledger, actor, order_number=None, destination=None) -> LedgerChange:
        recompute_balance(ledger)
        events = self.locks.apply(ledger, actor, order_number=order_number, destination=destination)
        self.ledgers.save(ledger)
        promoted = self.queue.complete_if_done(ledger)
        return LedgerChange(ledger=ledger, events=events, promoted=promoted)

    def move_to_truck(self, ledger, truck_no):
        """Re-place an open ledger on another truck's queue. Does not save the ledger."""
        old_truck = ledger.truck_no
        was_open  = ledger.journey_status in (FuelLedger.JourneyStatus.ACTIVE, FuelLedger.JourneyStatus.QUEUED)
        ledger.truck_no = truck_no
        if was_open:
            # Drop out of the old queue before taking a place in the new one
            ledger.journey_status = FuelLedger.JourneyStatus.QUEUED
            ledger.queue_order    = None
            self.ledgers.save(ledger, ["truck_no", "journey_status", "queue_order"])
            self.queue.renumber(old_truck)
            self.queue.place(ledger)
        logger.info("Ledger %s moved from truck %s to %s", ledger.id, old_truck, truck_no)
        return ledger

    # ── Operator actions ──────────────────────────────────────────────────────
    @transaction.atomic
    def update_ledger(self, ledger_id, changes: dict, actor) -> LedgerChange:
        """Set totals and/or checkpoints. Unknown fields are rejected before anything is written."""
        ledger = self.ledgers.get(ledger_id, for_update=True)
        if ledger.is_cancelled or ledger.journey_status == FuelLedger.JourneyStatus.CANCELLED:
            raise InvalidLedgerState("Cancelled fuel ledgers cannot be updated.")

        unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
        if unknown:
            raise FleetLedgerError(
                "These fields cannot be updated on a fuel ledger.",
                code="invalid_field", details={"fields": unknown},
            )

        for name, value in changes.items():
            setattr(ledger, name, value)

        change = self.settle(ledger, actor)
        change.report = self.dispatcher.drain(change.events)
        logger.info(
            "Ledger %s updated by %s (%s), balance %s",
            ledger.id, actor.username, ", ".join(sorted(changes)), ledger.balance,
        )
        return change

    @transaction.atomic
    def activate_next_journey(self, truck_no, actor) -> FuelLedger:
        """Promote the head of the queue on a truck with no active journey."""
        truck_no = normalize_truck_no(truck_no)
        if self.ledgers.active_for_truck(truck_no, for_update=True) is not None:
            raise InvalidLedgerState(f"Truck {truck_no} already has an active journey.")
        promoted = self.queue.promote_next(truck_no)
        if promoted is None:
            raise LedgerNotFound(f"No queued journey for truck {truck_no}.")
        logger.info("Next journey on %s activated by %s", truck_no, actor.username)
        self.queue.complete_if_done(promoted)
        return promoted

    # ── Queries ───────────────────────────────────────────────────────────────
    def journey_for_truck(self, truck_no) -> TruckJourney:
        truck_no = normalize_truck_no(truck_no)
        return TruckJourney(
            truck_no=truck_no,
            active=self.ledgers.active_for_truck(truck_no),
            queued=self.ledgers.queued_for_truck(truck_no),
        )
