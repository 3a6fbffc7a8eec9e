"""
Fuel ledger models.
A FuelLedger is one truck journey's fuel accounting; RouteConfig and TruckBatch
are the configuration its totals are resolved from.
"""

import uuid
from django.db import models
from django.db.models import Q
from django.core.validators import MinValueValidator


def _checkpoint():
    return models.DecimalField(max_digits=10, decimal_places=2, default=0)


class RouteConfig(models.Model):
    """Configured fuel volume for a route, matched by origin/destination or destination alias."""
    route_name           = models.CharField(max_length=120, unique=True)
    origin               = models.CharField(max_length=80, blank=True)
    destination          = models.CharField(max_length=80)
    destination_aliases  = models.JSONField(default=list, blank=True)
    default_total_liters = models.DecimalField(max_digits=10, decimal_places=2,
                                               validators=[MinValueValidator(0)])
    is_active            = models.BooleanField(default=True)
    created_at           = models.DateTimeField(auto_now_add=True)
    updated_at           = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["route_name"]
        indexes  = [models.Index(fields=["destination"], name="fuel_route_destination_idx")]

    def __str__(self):
        return f"{self.route_name} ({self.default_total_liters} L)"


class TruckBatch(models.Model):
    """Extra fuel allowance per truck, keyed on the plate's letter suffix."""
    truck_suffix = models.CharField(max_length=10, unique=True)
    extra_liters = models.DecimalField(max_digits=8, decimal_places=2,
                                       validators=[MinValueValidator(0)])
    created_at   = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["truck_suffix"]
        verbose_name_plural = "truck batches"

    def __str__(self):
        return f"{self.truck_suffix}: +{self.extra_liters} L"


class FuelLedger(models.Model):
    """One journey's fuel record. Balance is derived, see apps.fuel.balance."""

    class JourneyStatus(models.TextChoices):
        ACTIVE    = "active",    "Active"
        QUEUED    = "queued",    "Queued"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    class ConfigReason(models.TextChoices):
        NONE          = "none",                 "None"
        MISSING_TOTAL = "missing_total_liters", "Missing total liters"
        MISSING_EXTRA = "missing_extra_fuel",   "Missing extra fuel"
        BOTH          = "both",                 "Missing total and extra"

    id                  = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    truck_no            = models.CharField(max_length=20, db_index=True)
    going_do_number     = models.CharField(max_length=20, db_index=True)
    return_do_number    = models.CharField(max_length=20, blank=True, db_index=True)

    # Current leg
    from_location       = models.CharField(max_length=80, blank=True)
    to_location         = models.CharField(max_length=80, blank=True)
    # Going leg snapshot, set while a return order is linked
    original_going_from = models.CharField(max_length=80, blank=True)
    original_going_to   = models.CharField(max_length=80, blank=True)
    start_location      = models.CharField(max_length=80, blank=True)
    journey_date        = models.DateField(null=True, blank=True)

    # null = awaiting configuration
    total_liters        = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    extra_liters        = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    return_liters_added = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    # Yard draws
    mmsa_yard           = _checkpoint()
    tanga_yard          = _checkpoint()
    dar_yard            = _checkpoint()
    # Going leg
    dar_going           = _checkpoint()
    moro_going          = _checkpoint()
    mbeya_going         = _checkpoint()
    tdm_going           = _checkpoint()
    zambia_going        = _checkpoint()
    congo_fuel          = _checkpoint()
    # Return leg
    zambia_return       = _checkpoint()
    tunduma_return      = _checkpoint()
    mbeya_return        = _checkpoint()
    moro_return         = _checkpoint()
    dar_return          = _checkpoint()
    tanga_return        = _checkpoint()

    balance             = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    journey_status      = models.CharField(max_length=10, choices=JourneyStatus.choices,
                                           default=JourneyStatus.ACTIVE)
    queue_order         = models.PositiveIntegerField(null=True, blank=True)
    waiting_behind      = models.ForeignKey("self", on_delete=models.SET_NULL, null=True, blank=True,
                                            related_name="waiting_ledgers")
    activated_at        = models.DateTimeField(null=True, blank=True)
    completed_at        = models.DateTimeField(null=True, blank=True)

    is_locked             = models.BooleanField(default=False)
    pending_config_reason = models.CharField(max_length=20, choices=ConfigReason.choices,
                                             default=ConfigReason.NONE)

    is_cancelled        = models.BooleanField(default=False)
    cancelled_at        = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)
    cancelled_by        = models.CharField(max_length=60, blank=True)

    is_deleted          = models.BooleanField(default=False)
    deleted_at          = models.DateTimeField(null=True, blank=True)

    created_by          = models.CharField(max_length=60, blank=True)
    created_at          = models.DateTimeField(auto_now_add=True)
    updated_at          = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes  = [
            models.Index(fields=["truck_no", "journey_status"], name="fuel_ledger_truck_status_idx"),
            models.Index(fields=["is_locked"],                  name="fuel_ledger_locked_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["truck_no"],
                condition=Q(journey_status="active", is_deleted=False),
                name="fuel_ledger_one_active_per_truck",
            ),
        ]

    def __str__(self):
        return f"{self.truck_no} / {self.going_do_number} [{self.journey_status}]"
