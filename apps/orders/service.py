"""
CascadeCoordinator: the four order operations.

    create_order         IMPORT → open ledger (active or queued)
                         EXPORT → re-link to the truck's open ledger, else unlinked notification
    edit_order           truck / loading point / destination cascade into ledger + LPO entries
    cancel_order         IMPORT → ledger cancelled; EXPORT → ledger reverted to going leg
    relink_return_order  explicit re-link of an EXPORT order

Each runs in one transaction and returns the order with a CascadeResult.
LPO cascades and notifications are fail-soft: their failures are logged and
left out of the result, never rolled into the order mutation.
"""

import logging
from dataclasses import dataclass

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.fuel.repository import LedgerRepository, RouteConfigLookup
from apps.fuel.service import LedgerService
from apps.fuel.trucks import normalize_truck_no
from apps.notifications.service import NotificationDispatcher
from apps.procurement.repository import LPOEntryRepository

from . import numbering
from .commands import ApplyCancel, ApplyEdit, CascadeResult, RelinkReturn
from .exceptions import InvalidOrderState
from .models import DeliveryOrder
from .repository import OrderRepository

logger = logging.getLogger("fleetledger.orders")


@dataclass
class OrderOutcome:
    order: DeliveryOrder
    cascade: CascadeResult


class CascadeCoordinator:
    """
    Order lifecycle orchestration.
    Dependencies are injected so they can be swapped in tests.
    """

    def __init__(
        self,
        orders=None,
        ledgers=None,
        routes=None,
        ledger_service=None,
        procurement=None,
        dispatcher=None,
    ):
        self.orders         = orders      or OrderRepository()
        self.ledgers        = ledgers     or LedgerRepository()
        self.routes         = routes      or RouteConfigLookup()
        self.dispatcher     = dispatcher  or NotificationDispatcher()
        self.procurement    = procurement or LPOEntryRepository()
        self.ledger_service = ledger_service or LedgerService(
            ledgers=self.ledgers, routes=self.routes, dispatcher=self.dispatcher,
        )

    # ── Create ────────────────────────────────────────────────────────────────
    @transaction.atomic
    def create_order(self, data: dict, actor) -> OrderOutcome:
        data       = dict(data)
        kind       = data.pop("order_kind", None) or DeliveryOrder.Kind.DO
        order_date = data.pop("order_date", None) or timezone.localdate()
        number     = (data.pop("order_number", "") or "").strip()

        if number:
            if self.orders.number_taken(number):
                raise InvalidOrderState(f"Order number {number} already exists.", code="duplicate_order_number")
            sn = numbering.parse_serial(number) or numbering.next_serial(kind, order_date.year)
        else:
            sn, number = numbering.next_order_number(kind, order_date.year)

        data["truck_no"] = normalize_truck_no(data.get("truck_no", ""))
        try:
            with transaction.atomic():
                order = self.orders.create(
                    sn=sn, order_number=number, order_kind=kind, order_date=order_date,
                    created_by=actor.username, **data,
                )
        except IntegrityError:
            # Another request took the same number between allocation and insert
            logger.warning("Order number %s taken concurrently", number)
            raise InvalidOrderState(
                f"Order number {number} already exists.", code="duplicate_order_number",
            ) from None
        logger.info("%s %s created by %s for truck %s", kind, number, actor.username, order.truck_no)

        if not order.touches_ledger:
            logger.info("SDO %s: no fuel ledger involvement", number)
            result = CascadeResult()
        elif order.direction == DeliveryOrder.Direction.IMPORT:
            result = CascadeResult()
            result.absorb(self.ledger_service.open_for_going_order(order, actor), "opened")
        else:
            result = RelinkReturn(order, actor, explicit=False).run(self)
        return self._finish(order, result)

    # ── Edit ──────────────────────────────────────────────────────────────────
    @transaction.atomic
    def edit_order(self, order_id, changes: dict, actor, reason="") -> OrderOutcome:
        order  = self.orders.get(order_id, for_update=True)
        result = ApplyEdit(order, changes, actor, reason).run(self)
        return self._finish(order, result)

    # ── Cancel ────────────────────────────────────────────────────────────────
    @transaction.atomic
    def cancel_order(self, order_id, actor, reason="") -> OrderOutcome:
        order  = self.orders.get(order_id, for_update=True)
        result = ApplyCancel(order, actor, reason).run(self)
        return self._finish(order, result)

    # ── Re-link ───────────────────────────────────────────────────────────────
    @transaction.atomic
    def relink_return_order(self, order_id, actor) -> OrderOutcome:
        order  = self.orders.get(order_id, for_update=True)
        result = RelinkReturn(order, actor, explicit=True).run(self)
        return self._finish(order, result)

    # ── Helpers ───────────────────────────────────────────────────────────────
    def fail_soft(self, label, order, fn, default=0):
        """Run a side effect in its own savepoint; on failure log it and return default."""
        try:
            with transaction.atomic():
                return fn()
        except Exception:
            logger.exception("%s failed for DO %s, continuing", label, order.order_number)
            return default

    def _finish(self, order, result) -> OrderOutcome:
        if result.outbox:
            report = self.dispatcher.drain(result.outbox)
            result.notifications_raised   = [str(n.id) for n in report.created]
            result.notifications_resolved = report.resolved
            result.outbox = []
        return OrderOutcome(order=order, cascade=result)

    # ── Queries ───────────────────────────────────────────────────────────────
    def orders_for_truck(self, truck_no):
        return self.orders.for_truck(normalize_truck_no(truck_no))
