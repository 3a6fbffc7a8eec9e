"""ORM-backed delivery order access. Soft-deleted orders are invisible here."""

import logging

from django.utils import timezone

from .exceptions import OrderNotFound
from .models import DeliveryOrder, DeliveryOrderEdit

logger = logging.getLogger("fleetledger.orders")


class OrderRepository:

    def _live(self, for_update=False):
        qs = DeliveryOrder.objects.filter(is_deleted=False)
        if for_update:
            qs = qs.select_for_update()
        return qs

    def get(self, order_id, for_update=False) -> DeliveryOrder:
        try:
            return self._live(for_update).get(id=order_id)
        except (DeliveryOrder.DoesNotExist, ValueError):
            raise OrderNotFound(f"Delivery order {order_id} not found.")

    def by_number(self, order_number):
        return self._live().filter(order_number=order_number).first()

    def for_truck(self, truck_no):
        return self._live().filter(truck_no=truck_no).order_by("-order_date", "-sn")

    def by_kind(self, kind):
        return self._live().filter(order_kind=kind)

    def create(self, **fields) -> DeliveryOrder:
        return DeliveryOrder.objects.create(**fields)

    def save(self, order):
        order.save()
        return order

    def record_edit(self, order, field, old_value, new_value, actor, reason=""):
        return DeliveryOrderEdit.objects.create(
            order=order,
            field=field,
            old_value="" if old_value is None else str(old_value),
            new_value="" if new_value is None else str(new_value),
            reason=reason or "",
            edited_by=actor.username,
        )

    def soft_delete(self, order, actor):
        """Admin clean-up only; does not cascade."""
        order.is_deleted = True
        order.deleted_at = timezone.now()
        order.save(update_fields=["is_deleted", "deleted_at", "updated_at"])
        logger.info("DO %s soft-deleted by %s", order.order_number, actor.username)
        return order

    def number_taken(self, order_number) -> bool:
        return DeliveryOrder.objects.filter(order_number=order_number).exists()
