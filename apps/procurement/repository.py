"""Bulk cascades onto LPO entries, matched by delivery-order number. NIL entries are never touched."""

import logging

from django.utils import timezone

from .models import LPOEntry, NIL_ORDER

logger = logging.getLogger("fleetledger.procurement")


class LPOEntryRepository:

    def for_order(self, do_number):
        if not do_number or do_number.upper() == NIL_ORDER:
            return LPOEntry.objects.none()
        return LPOEntry.objects.filter(do_number=do_number, is_deleted=False)

    def update_for_order(self, do_number, truck_no=None, destinations=None) -> int:
        fields = {}
        if truck_no:
            fields["truck_no"] = truck_no
        if destinations:
            fields["destinations"] = destinations
        if not fields:
            return 0
        count = self.for_order(do_number).update(updated_at=timezone.now(), **fields)
        logger.info("Updated %d LPO entries for DO %s (%s)", count, do_number, ", ".join(sorted(fields)))
        return count

    def soft_delete_for_order(self, do_number) -> int:
        now = timezone.now()
        count = self.for_order(do_number).update(is_deleted=True, deleted_at=now, updated_at=now)
        logger.info("Cancelled %d LPO entries for DO %s", count, do_number)
        return count
