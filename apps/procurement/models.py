"""
Procurement (LPO) entries.
Each line references a delivery order by number, or NIL for cash / driver-account fuel.
"""

import uuid
from django.db import models
from django.core.validators import MinValueValidator

NIL_ORDER = "NIL"


class LPOEntry(models.Model):
    id              = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    lpo_no          = models.CharField(max_length=20, db_index=True)
    entry_date      = models.DateField()
    station         = models.CharField(max_length=60)
    do_number       = models.CharField(max_length=20, default=NIL_ORDER, db_index=True)
    truck_no        = models.CharField(max_length=20)
    liters          = models.DecimalField(max_digits=10, decimal_places=2,
                                          validators=[MinValueValidator(0)])
    price_per_liter = models.DecimalField(max_digits=10, decimal_places=2,
                                          validators=[MinValueValidator(0)])
    destinations    = models.CharField(max_length=120, blank=True)
    is_deleted      = models.BooleanField(default=False)
    deleted_at      = models.DateTimeField(null=True, blank=True)
    created_at      = models.DateTimeField(auto_now_add=True)
    updated_at      = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-entry_date", "lpo_no"]
        verbose_name = "LPO entry"
        verbose_name_plural = "LPO entries"

    def __str__(self):
        return f"LPO {self.lpo_no} / {self.do_number}: {self.liters} L"

    @property
    def amount(self):
        return self.liters * self.price_per_liter
