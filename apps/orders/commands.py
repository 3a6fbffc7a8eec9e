"""
Order lifecycle commands.

Each command mutates one delivery order and cascades into its fuel ledger,
returning a CascadeResult. Notifications are not sent from here: commands
append outbox events to the result and the coordinator drains them.

    IMPORT order  ── going_do_number ──►  FuelLedger  ◄── return_do_number ──  EXPORT order
                                              │
                     LPOEntry.do_number ──────┘ (by order number, either direction)
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from django.utils import timezone

from apps.fuel.balance import RETURN_CHECKPOINTS
from apps.fuel.trucks import normalize_truck_no
from apps.notifications.locks import unlinked_return_request, unlinked_return_resolution

from .exceptions import InvalidOrderState, LedgerNotFound
from .models import DeliveryOrder

logger = logging.getLogger("fleetledger.cascade")

Direction = DeliveryOrder.Direction


@dataclass
class CascadeResult:
    """What else an order mutation changed."""
    ledger_id: Optional[str] = None
    ledger_action: str = ""
    ledger_status: Optional[str] = None
    ledger_locked: bool = False
    ledger_changes: list = field(default_factory=list)
    promoted_ledger_id: Optional[str] = None
    unlinked_return: bool = False
    procurement_entries_updated: int = 0
    procurement_entries_cancelled: int = 0
    notifications_raised: list = field(default_factory=list)
    notifications_resolved: int = 0
    outbox: list = field(default_factory=list, repr=False)

    @property
    def ledger_updated(self) -> bool:
        return bool(self.ledger_action) and self.ledger_action != "already_linked"

    def note_ledger(self, ledger, action, promoted=None):
        self.ledger_id     = str(ledger.id)
        self.ledger_action = action
        self.ledger_status = ledger.journey_status
        self.ledger_locked = ledger.is_locked
        if promoted is not None:
            self.promoted_ledger_id = str(promoted.id)

    def absorb(self, change, action):
        self.note_ledger(change.ledger, action, change.promoted)
        self.outbox.extend(change.events)

    def as_dict(self) -> dict:
        return {
            "ledger_updated":                self.ledger_updated,
            "ledger_id":                     self.ledger_id,
            "ledger_action":                 self.ledger_action or None,
            "ledger_status":                 self.ledger_status,
            "ledger_locked":                 self.ledger_locked,
            "ledger_changes":                list(self.ledger_changes),
            "promoted_ledger_id":            self.promoted_ledger_id,
            "unlinked_return":               self.unlinked_return,
            "procurement_entries_updated":   self.procurement_entries_updated,
            "procurement_entries_cancelled": self.procurement_entries_cancelled,
            "notifications_raised":          list(self.notifications_raised),
            "notifications_resolved":        self.notifications_resolved,
        }


def _going_leg(ledger):
    return (
        ledger.original_going_from or ledger.from_location,
        ledger.original_going_to or ledger.to_location,
    )


# ── Edit ──────────────────────────────────────────────────────────────────────
@dataclass
class ApplyEdit:
    order: DeliveryOrder
    changes: dict
    actor: object
    reason: str = ""

    def run(self, ctx) -> CascadeResult:
        order = self.order
        if order.is_cancelled:
            raise InvalidOrderState(f"DO {order.order_number} is cancelled and cannot be edited.")

        before  = {name: getattr(order, name) for name in DeliveryOrder.CASCADE_FIELDS}
        changed = []
        for name, value in self.changes.items():
            if name not in DeliveryOrder.TRACKED_FIELDS:
                continue
            if name == "truck_no":
                value = normalize_truck_no(value)
            old = getattr(order, name)
            if old == value:
                continue
            setattr(order, name, value)
            ctx.orders.record_edit(order, name, old, value, self.actor, self.reason)
            changed.append(name)

        result = CascadeResult()
        if not changed:
            return result

        order.last_edited_at = timezone.now()
        order.last_edited_by = self.actor.username
        ctx.orders.save(order)
        logger.info("DO %s edited by %s: %s", order.order_number, self.actor.username, ", ".join(changed))

        cascading = [name for name in changed if name in DeliveryOrder.CASCADE_FIELDS]
        if cascading and order.touches_ledger:
            self._cascade_to_ledger(ctx, before, cascading, result)

        if "truck_no" in changed or "destination" in changed:
            result.procurement_entries_updated = ctx.fail_soft(
                "LPO update", order,
                lambda: ctx.procurement.update_for_order(
                    order.order_number,
                    truck_no=order.truck_no if "truck_no" in changed else None,
                    destinations=order.destination if "destination" in changed else None,
                ),
            )
        return result

    def _cascade_to_ledger(self, ctx, before, fields, result):
        order = self.order
        if order.direction == Direction.IMPORT:
            ledger = ctx.ledgers.for_going_order(order.order_number, for_update=True)
        else:
            ledger = ctx.ledgers.for_return_order(order.order_number, for_update=True)
        if ledger is None:
            logger.info("No fuel ledger linked to DO %s, nothing to cascade", order.order_number)
            return

        if "truck_no" in fields:
            ctx.ledger_service.move_to_truck(ledger, order.truck_no)
            result.ledger_changes.append(f"Truck: {before['truck_no']} → {order.truck_no}")

        origin, destination = order.leg_endpoints()
        if "loading_point" in fields or "destination" in fields:
            volume = ctx.routes.volume_for(origin, destination)
            if order.direction == Direction.IMPORT:
                self._retarget_going_leg(ledger, origin, destination, volume)
            else:
                self._retarget_return_leg(ctx, ledger, origin, destination, volume)
            result.ledger_changes.append(f"Route: {origin} → {destination}")
            if volume is None:
                logger.warning(
                    "No route volume for %s → %s (DO %s); ledger %s awaiting configuration",
                    origin, destination, order.order_number, ledger.id,
                )

        change = ctx.ledger_service.settle(
            ledger, self.actor, order_number=order.order_number, destination=destination,
        )
        result.absorb(change, "updated")
        logger.info("Ledger %s updated from DO %s: %s", ledger.id, order.order_number, "; ".join(result.ledger_changes))

    @staticmethod
    def _retarget_going_leg(ledger, origin, destination, volume):
        # While a return order is linked, from/to show the return leg
        if ledger.return_do_number:
            ledger.original_going_from = origin
            ledger.original_going_to   = destination
        else:
            ledger.from_location = origin
            ledger.to_location   = destination
        ledger.total_liters = None if volume is None else volume + ledger.return_liters_added

    @staticmethod
    def _retarget_return_leg(ctx, ledger, origin, destination, volume):
        ledger.from_location = origin
        ledger.to_location   = destination
        if volume is None:
            ledger.total_liters        = None
            ledger.return_liters_added = Decimal("0")
            return
        if ledger.total_liters is not None:
            going = ledger.total_liters - ledger.return_liters_added
        else:
            going = ctx.routes.volume_for(*_going_leg(ledger))
        ledger.total_liters        = None if going is None else going + volume
        ledger.return_liters_added = volume


# ── Cancel ────────────────────────────────────────────────────────────────────
@dataclass
class ApplyCancel:
    order: DeliveryOrder
    actor: object
    reason: str = ""

    def run(self, ctx) -> CascadeResult:
        order = self.order
        if order.is_cancelled:
            raise InvalidOrderState(f"DO {order.order_number} is already cancelled.")

        order.is_cancelled        = True
        order.cancelled_at        = timezone.now()
        order.cancellation_reason = self.reason
        order.cancelled_by        = self.actor.username
        ctx.orders.save(order)
        ctx.orders.record_edit(order, "status", "active", "cancelled", self.actor, self.reason)
        logger.info("DO %s cancelled by %s: %s", order.order_number, self.actor.username, self.reason)

        result = CascadeResult()
        if not order.touches_ledger:
            logger.info("Skipping fuel ledger cascade for SDO %s", order.order_number)
        elif order.direction == Direction.IMPORT:
            self._cancel_journey(ctx, result)
        else:
            self._remove_return_leg(ctx, result)

        result.procurement_entries_cancelled = ctx.fail_soft(
            "LPO cancel", order,
            lambda: ctx.procurement.soft_delete_for_order(order.order_number),
        )
        return result

    def _cancel_journey(self, ctx, result):
        order  = self.order
        ledger = ctx.ledgers.for_going_order(order.order_number, for_update=True)
        if ledger is None:
            logger.info("No fuel ledger for cancelled IMPORT DO %s", order.order_number)
            return

        ledger.is_cancelled        = True
        ledger.cancelled_at        = timezone.now()
        ledger.cancellation_reason = f"Going DO {order.order_number} cancelled: {self.reason}"[:255]
        ledger.cancelled_by        = self.actor.username
        # A completed journey keeps its status; only open ones leave the queue
        if ledger.journey_status in (ledger.JourneyStatus.ACTIVE, ledger.JourneyStatus.QUEUED):
            ctx.ledger_service.queue.withdraw(ledger)
        ctx.ledgers.save(ledger)
        result.note_ledger(ledger, "cancelled")
        logger.info("Ledger %s fully cancelled with going DO %s", ledger.id, order.order_number)

    def _remove_return_leg(self, ctx, result):
        order  = self.order
        ledger = ctx.ledgers.for_return_order(order.order_number, for_update=True)
        if ledger is None:
            logger.info("Cancelled EXPORT DO %s was not linked to a ledger", order.order_number)
            result.outbox.append(unlinked_return_resolution(order, self.actor))
            return

        revert_from, revert_to = ledger.original_going_from, ledger.original_going_to
        if not (revert_from and revert_to):
            going = ctx.orders.by_number(ledger.going_do_number)
            if going is not None:
                revert_from, revert_to = going.leg_endpoints()
            else:
                revert_from, revert_to = ledger.from_location, ledger.to_location

        ledger.return_do_number    = ""
        ledger.from_location       = revert_from
        ledger.to_location         = revert_to
        ledger.original_going_from = ""
        ledger.original_going_to   = ""
        for name in RETURN_CHECKPOINTS:
            setattr(ledger, name, Decimal("0"))
        if ledger.total_liters is not None:
            ledger.total_liters -= ledger.return_liters_added
        ledger.return_liters_added = Decimal("0")

        change = ctx.ledger_service.settle(
            ledger, self.actor, order_number=ledger.going_do_number, destination=revert_to,
        )
        result.absorb(change, "return_removed")
        logger.info(
            "Return DO %s removed from ledger %s, reverted to %s → %s",
            order.order_number, ledger.id, revert_from, revert_to,
        )


# ── Re-link ───────────────────────────────────────────────────────────────────
@dataclass
class RelinkReturn:
    """
    Attach an EXPORT order to its truck's open ledger as the return leg.
    With explicit=False (order creation) a missing ledger raises an
    unlinked-return notification instead of an error.
    """
    order: DeliveryOrder
    actor: object
    explicit: bool = True

    def run(self, ctx) -> CascadeResult:
        order = self.order
        if not order.touches_ledger:
            raise InvalidOrderState(f"SDO {order.order_number} never links to a fuel ledger.")
        if order.direction != Direction.EXPORT:
            raise InvalidOrderState(f"DO {order.order_number} is not a return (EXPORT) order.")
        if order.is_cancelled:
            raise InvalidOrderState(f"DO {order.order_number} is cancelled and cannot be re-linked.")

        result = CascadeResult()
        existing = ctx.ledgers.for_return_order(order.order_number, for_update=True)
        if existing is not None:
            logger.info("DO %s already linked to ledger %s", order.order_number, existing.id)
            result.note_ledger(existing, "already_linked")
            result.outbox.append(unlinked_return_resolution(order, self.actor))
            return result

        ledger = ctx.ledgers.relink_candidate(order.truck_no, for_update=True)
        if ledger is None:
            if self.explicit:
                raise LedgerNotFound(
                    f"No open fuel ledger on truck {order.truck_no} to link DO {order.order_number} to."
                )
            logger.warning("Return DO %s left unlinked: no open ledger on %s", order.order_number, order.truck_no)
            result.unlinked_return = True
            result.outbox.append(unlinked_return_request(order, self.actor))
            return result

        origin, destination = order.leg_endpoints()
        ledger.original_going_from = ledger.original_going_from or ledger.from_location
        ledger.original_going_to   = ledger.original_going_to or ledger.to_location
        ledger.from_location       = origin
        ledger.to_location         = destination
        ledger.return_do_number    = order.order_number

        volume = ctx.routes.volume_for(origin, destination)
        if volume is not None:
            if ledger.total_liters is not None:
                ledger.total_liters += volume
            ledger.return_liters_added = volume
            result.ledger_changes.append(f"Return fuel: +{volume} L")
        result.ledger_changes.append(f"Return leg: {origin} → {destination}")

        change = ctx.ledger_service.settle(
            ledger, self.actor, order_number=ledger.going_do_number, destination=ledger.original_going_to,
        )
        result.absorb(change, "linked")
        result.outbox.append(unlinked_return_resolution(order, self.actor))
        logger.info("Return DO %s linked to ledger %s", order.order_number, ledger.id)
        return result
