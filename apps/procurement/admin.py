from django.contrib import admin
from .models import LPOEntry


@admin.register(LPOEntry)
class LPOEntryAdmin(admin.ModelAdmin):
    list_display    = ("lpo_no", "entry_date", "station", "do_number", "truck_no", "liters", "price_per_liter", "is_deleted")
    list_filter     = ("station", "is_deleted")
    search_fields   = ("lpo_no", "do_number", "truck_no")
    readonly_fields = ("id", "created_at", "updated_at")
    ordering        = ("-entry_date",)
