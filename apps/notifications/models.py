"""
Notification records.
Created by the dispatcher; resolved automatically when the condition that raised
them clears, or manually by a recipient.
"""

import uuid
from django.db import models


class Notification(models.Model):

    class Type(models.TextChoices):
        MISSING_TOTAL = "missing_total_liters", "Missing total liters"
        MISSING_EXTRA = "missing_extra_fuel",   "Missing extra fuel"
        BOTH          = "both",                 "Missing total and extra"
        UNLINKED      = "unlinked_export_do",   "Unlinked return order"
        INFO          = "info",                 "Info"
        WARNING       = "warning",              "Warning"

    class Status(models.TextChoices):
        PENDING   = "pending",   "Pending"
        RESOLVED  = "resolved",  "Resolved"
        DISMISSED = "dismissed", "Dismissed"

    id            = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    type          = models.CharField(max_length=24, choices=Type.choices)
    title         = models.CharField(max_length=160)
    message       = models.TextField()
    related_model = models.CharField(max_length=40)
    related_id    = models.CharField(max_length=64)
    metadata      = models.JSONField(default=dict, blank=True)
    # Roles and/or usernames
    recipients    = models.JSONField(default=list)
    status        = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    is_read       = models.BooleanField(default=False)
    read_by       = models.JSONField(default=list, blank=True)
    resolved_at   = models.DateTimeField(null=True, blank=True)
    resolved_by   = models.CharField(max_length=60, blank=True)
    created_by    = models.CharField(max_length=60, blank=True)
    created_at    = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes  = [
            models.Index(fields=["related_model", "related_id", "status"], name="notif_related_status_idx"),
            models.Index(fields=["status", "created_at"],                   name="notif_status_created_idx"),
        ]

    def __str__(self):
        return f"{self.type}: {self.title} [{self.status}]"

    def is_addressed_to(self, username, role) -> bool:
        return username in self.recipients or role in self.recipients
