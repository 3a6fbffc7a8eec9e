"""
Delivery order models.
Orders are never deleted; edits append to the history, cancellation is a flag.
"""

import uuid
from django.db import models
from django.utils import timezone


class DeliveryOrder(models.Model):
    """A transport authorization. IMPORT orders open a fuel ledger, EXPORT orders close one."""

    class Kind(models.TextChoices):
        DO  = "DO",  "Delivery Order"
        SDO = "SDO", "Special Delivery Order"   # never touches the fuel ledger

    class Direction(models.TextChoices):
        IMPORT = "IMPORT", "Import (going)"
        EXPORT = "EXPORT", "Export (return)"

    # Edits to these are recorded in the history
    TRACKED_FIELDS = (
        "truck_no", "trailer_no", "loading_point", "destination",
        "client_name", "driver_name", "tonnages",
    )
    # Edits to these cascade to the ledger
    CASCADE_FIELDS = ("truck_no", "loading_point", "destination")

    id                  = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sn                  = models.PositiveIntegerField()
    order_number        = models.CharField(max_length=20, unique=True)
    order_date          = models.DateField(default=timezone.localdate)
    order_kind          = models.CharField(max_length=3, choices=Kind.choices, default=Kind.DO)
    direction           = models.CharField(max_length=6, choices=Direction.choices)

    client_name         = models.CharField(max_length=120, blank=True)
    truck_no            = models.CharField(max_length=20, db_index=True)
    trailer_no          = models.CharField(max_length=20, blank=True)
    driver_name         = models.CharField(max_length=120, blank=True)
    loading_point       = models.CharField(max_length=80)
    destination         = models.CharField(max_length=80)
    tonnages            = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)

    is_cancelled        = models.BooleanField(default=False)
    cancelled_at        = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)
    cancelled_by        = models.CharField(max_length=60, blank=True)

    is_deleted          = models.BooleanField(default=False)
    deleted_at          = models.DateTimeField(null=True, blank=True)

    created_by          = models.CharField(max_length=60, blank=True)
    created_at          = models.DateTimeField(auto_now_add=True)
    updated_at          = models.DateTimeField(auto_now=True)
    last_edited_at      = models.DateTimeField(null=True, blank=True)
    last_edited_by      = models.CharField(max_length=60, blank=True)

    class Meta:
        ordering = ["-order_date", "-sn"]
        indexes  = [
            models.Index(fields=["order_kind", "order_date"], name="orders_kind_date_idx"),
            models.Index(fields=["truck_no", "direction"],    name="orders_truck_direction_idx"),
        ]

    def __str__(self):
        return f"{self.order_kind} {self.order_number} [{self.direction}]"

    @property
    def touches_ledger(self) -> bool:
        return self.order_kind == self.Kind.DO

    def leg_endpoints(self):
        """(from, to) of the journey leg this order describes."""
        if self.direction == self.Direction.IMPORT:
            return self.loading_point, self.destination
        return self.destination, self.loading_point


class DeliveryOrderEdit(models.Model):
    """Append-only edit history entry."""
    order      = models.ForeignKey(DeliveryOrder, on_delete=models.CASCADE, related_name="edit_history")
    field      = models.CharField(max_length=40)
    old_value  = models.CharField(max_length=255, blank=True)
    new_value  = models.CharField(max_length=255, blank=True)
    reason     = models.CharField(max_length=255, blank=True)
    edited_by  = models.CharField(max_length=60, blank=True)
    edited_at  = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["edited_at", "id"]

    def __str__(self):
        return f"{self.order.order_number}: {self.field} {self.old_value!r} → {self.new_value!r}"
