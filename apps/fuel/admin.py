from django.contrib import admin
from .models import FuelLedger, RouteConfig, TruckBatch


@admin.register(FuelLedger)
class FuelLedgerAdmin(admin.ModelAdmin):
    list_display    = ("truck_no", "going_do_number", "return_do_number", "journey_status", "queue_order", "balance", "is_locked", "is_cancelled")
    list_filter     = ("journey_status", "is_locked", "is_cancelled", "pending_config_reason")
    search_fields   = ("truck_no", "going_do_number", "return_do_number")
    readonly_fields = ("id", "balance", "created_at", "updated_at", "activated_at", "completed_at")
    ordering        = ("-created_at",)


@admin.register(RouteConfig)
class RouteConfigAdmin(admin.ModelAdmin):
    list_display  = ("route_name", "origin", "destination", "default_total_liters", "is_active")
    list_filter   = ("is_active",)
    search_fields = ("route_name", "origin", "destination")


@admin.register(TruckBatch)
class TruckBatchAdmin(admin.ModelAdmin):
    list_display  = ("truck_suffix", "extra_liters", "created_at")
    search_fields = ("truck_suffix",)
