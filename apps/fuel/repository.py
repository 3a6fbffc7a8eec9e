"""
ORM-backed lookups for ledgers and fuel configuration.
Services take these through their constructors so tests can swap them.
"""

from decimal import Decimal
from typing import Optional

from apps.orders.exceptions import LedgerNotFound

from .models import FuelLedger, RouteConfig, TruckBatch
from .trucks import truck_suffix

OPEN_STATUSES = (FuelLedger.JourneyStatus.ACTIVE, FuelLedger.JourneyStatus.QUEUED)


class LedgerRepository:

    def _live(self, for_update=False):
        qs = FuelLedger.objects.filter(is_deleted=False)
        if for_update:
            qs = qs.select_for_update()
        return qs

    def get(self, ledger_id, for_update=False) -> FuelLedger:
        try:
            return self._live(for_update).get(id=ledger_id)
        except (FuelLedger.DoesNotExist, ValueError):
            raise LedgerNotFound(f"Fuel ledger {ledger_id} not found.")

    def for_going_order(self, order_number, for_update=False) -> Optional[FuelLedger]:
        return (
            self._live(for_update)
            .filter(going_do_number=order_number, is_cancelled=False)
            .order_by("-created_at")
            .first()
        )

    def for_return_order(self, order_number, for_update=False) -> Optional[FuelLedger]:
        if not order_number:
            return None
        return (
            self._live(for_update)
            .filter(return_do_number=order_number, is_cancelled=False)
            .order_by("-created_at")
            .first()
        )

    def active_for_truck(self, truck_no, for_update=False, exclude=None) -> Optional[FuelLedger]:
        qs = self._live(for_update).filter(truck_no=truck_no, journey_status=FuelLedger.JourneyStatus.ACTIVE)
        if exclude is not None:
            qs = qs.exclude(id=exclude)
        return qs.first()

    def queued_for_truck(self, truck_no, for_update=False, exclude=None) -> list:
        qs = self._live(for_update).filter(truck_no=truck_no, journey_status=FuelLedger.JourneyStatus.QUEUED)
        if exclude is not None:
            qs = qs.exclude(id=exclude)
        return list(qs.order_by("queue_order", "created_at"))

    def for_truck(self, truck_no) -> list:
        return list(self._live().filter(truck_no=truck_no).order_by("-created_at"))

    def relink_candidate(self, truck_no, for_update=False) -> Optional[FuelLedger]:
        """Open ledger on this truck still waiting for a return order: the active one first, then the newest."""
        candidates = (
            self._live(for_update)
            .filter(truck_no=truck_no, return_do_number="", is_cancelled=False,
                    journey_status__in=OPEN_STATUSES)
        )
        active = candidates.filter(journey_status=FuelLedger.JourneyStatus.ACTIVE).first()
        if active is not None:
            return active
        return candidates.order_by("-created_at").first()

    def save(self, ledger, fields=None):
        if fields:
            ledger.save(update_fields=sorted(set(fields) | {"updated_at"}))
        else:
            ledger.save()
        return ledger


class RouteConfigLookup:
    """Route fuel volume: exact origin/destination first, then destination or alias alone."""

    def volume_for(self, origin, destination) -> Optional[Decimal]:
        route = self.find(origin, destination)
        return route.default_total_liters if route else None

    def find(self, origin, destination) -> Optional[RouteConfig]:
        dest = (destination or "").strip().upper()
        if not dest:
            return None
        routes = list(RouteConfig.objects.filter(is_active=True))
        org = (origin or "").strip().upper()

        if org:
            for route in routes:
                if route.origin.strip().upper() == org and self._matches(route, dest):
                    return route
        for route in routes:
            if self._matches(route, dest):
                return route
        return None

    @staticmethod
    def _matches(route, dest) -> bool:
        if route.destination.strip().upper() == dest:
            return True
        return any((alias or "").strip().upper() == dest for alias in route.destination_aliases or [])


class TruckBatchLookup:

    def extra_for(self, truck_no) -> Optional[Decimal]:
        suffix = truck_suffix(truck_no)
        if not suffix:
            return None
        batch = TruckBatch.objects.filter(truck_suffix=suffix).first()
        return batch.extra_liters if batch else None
