from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display    = ("title", "type", "status", "related_model", "related_id", "is_read", "created_at")
    list_filter     = ("type", "status", "is_read")
    search_fields   = ("title", "related_id")
    readonly_fields = ("id", "created_at", "resolved_at", "resolved_by")
