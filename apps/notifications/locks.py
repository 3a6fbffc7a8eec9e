"""
Configuration lock policy.

A ledger whose total_liters or extra_liters is null is locked for the reason
that is missing. Locking surfaces a notification and keeps the ledger from
completing; it never blocks edits. Once both values are present the ledger is
unlocked and every pending notification on it is resolved.
"""

import logging

from fleetledger.conf import fleet_setting
from apps.fuel.models import FuelLedger
from apps.fuel.trucks import truck_suffix

from .models import Notification
from .outbox import NotificationRequest, NotificationResolution

logger = logging.getLogger("fleetledger.notifications")

Reason = FuelLedger.ConfigReason

LEDGER_MODEL = "FuelLedger"
ORDER_MODEL  = "DeliveryOrder"

_MISSING_FIELDS = {
    Reason.NONE:          frozenset(),
    Reason.MISSING_TOTAL: frozenset({"total_liters"}),
    Reason.MISSING_EXTRA: frozenset({"extra_liters"}),
    Reason.BOTH:          frozenset({"total_liters", "extra_liters"}),
}


def missing_reason(ledger) -> str:
    no_total = ledger.total_liters is None
    no_extra = ledger.extra_liters is None
    if no_total and no_extra:
        return Reason.BOTH
    if no_total:
        return Reason.MISSING_TOTAL
    if no_extra:
        return Reason.MISSING_EXTRA
    return Reason.NONE


class ConfigLockPolicy:
    """Sets the lock fields on a ledger and returns the outbox events the change calls for."""

    def apply(self, ledger, actor, order_number=None, destination=None) -> list:
        reason   = missing_reason(ledger)
        previous = Reason(ledger.pending_config_reason) if ledger.is_locked else Reason.NONE

        if reason == Reason.NONE:
            if not ledger.is_locked and ledger.pending_config_reason == Reason.NONE:
                return []
            ledger.is_locked             = False
            ledger.pending_config_reason = Reason.NONE
            logger.info("Ledger %s unlocked: configuration complete", ledger.id)
            return [NotificationResolution(
                related_model=LEDGER_MODEL,
                related_id=str(ledger.id),
                resolved_by=actor.username,
            )]

        ledger.is_locked             = True
        ledger.pending_config_reason = reason
        newly_missing = _MISSING_FIELDS[reason] - _MISSING_FIELDS[previous]
        if not newly_missing:
            return []

        logger.info("Ledger %s locked: %s", ledger.id, reason)
        return [missing_config_request(
            ledger, reason, actor,
            order_number=order_number or ledger.going_do_number,
            destination=destination or ledger.to_location,
        )]


# ── Request builders ──────────────────────────────────────────────────────────
_ADMIN_TITLES = {
    Reason.MISSING_TOTAL: "Action Required: Add Route Configuration",
    Reason.MISSING_EXTRA: "Action Required: Add Truck Batch Configuration",
    Reason.BOTH:          "Action Required: Add Route and Truck Batch Configuration",
}


def _what_is_missing(reason, destination, suffix) -> str:
    route = f"a route for {destination or 'this destination'}"
    batch = f"a truck batch for suffix {suffix or '?'}"
    if reason == Reason.MISSING_TOTAL:
        return route
    if reason == Reason.MISSING_EXTRA:
        return batch
    return f"{route} and {batch}"


def _where_to_configure(reason) -> str:
    if reason == Reason.MISSING_TOTAL:
        return "System Configuration > Routes"
    if reason == Reason.MISSING_EXTRA:
        return "System Configuration > Truck Batches"
    return "System Configuration > Routes and Truck Batches"


def missing_config_request(ledger, reason, actor, order_number, destination) -> NotificationRequest:
    """Admin-tier creators get an action item for their own role; anyone else alerts the admins."""
    suffix  = truck_suffix(ledger.truck_no)
    missing = _what_is_missing(reason, destination, suffix)

    if actor.is_admin_tier:
        recipients = [actor.role]
        title      = _ADMIN_TITLES[reason]
        message    = (
            f"DO {order_number} for truck {ledger.truck_no} has a locked fuel record: "
            f"no {missing} is configured. "
            f"Please go to {_where_to_configure(reason)} and add it to unlock the record."
        )
    else:
        recipients = [fleet_setting("OPERATIONAL_ROLE"), *fleet_setting("ADMIN_ROLES")]
        title      = f"Fuel Record Locked: DO {order_number}"
        message    = (
            f"{actor.username} created DO {order_number} for truck {ledger.truck_no}, "
            f"which needs admin action: {missing} must be configured "
            f"before the fuel record can be completed."
        )

    return NotificationRequest(
        type=Notification.Type(str(reason)).value,
        title=title,
        message=message,
        related_model=LEDGER_MODEL,
        related_id=str(ledger.id),
        recipients=recipients,
        metadata={
            "do_number":      order_number,
            "truck_no":       ledger.truck_no,
            "truck_suffix":   suffix,
            "destination":    destination,
            "missing_fields": sorted(_MISSING_FIELDS[reason]),
            "creator_role":   actor.role,
        },
        created_by=actor.username,
    )


def unlinked_return_request(order, actor) -> NotificationRequest:
    return NotificationRequest(
        type=Notification.Type.UNLINKED.value,
        title=f"Unlinked Return DO: {order.order_number}",
        message=(
            f"EXPORT DO {order.order_number} for truck {order.truck_no} found no open fuel "
            f"record to attach to. Re-link it once the truck's going journey is recorded."
        ),
        related_model=ORDER_MODEL,
        related_id=str(order.id),
        recipients=[fleet_setting("OPERATIONAL_ROLE")],
        metadata={
            "do_number":   order.order_number,
            "truck_no":    order.truck_no,
            "destination": order.destination,
        },
        created_by=actor.username,
    )


def unlinked_return_resolution(order, actor) -> NotificationResolution:
    return NotificationResolution(
        related_model=ORDER_MODEL,
        related_id=str(order.id),
        resolved_by=actor.username,
        types=(Notification.Type.UNLINKED.value,),
    )
