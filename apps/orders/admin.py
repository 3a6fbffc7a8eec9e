from django.contrib import admin

from apps.authentication.context import Actor
from .models import DeliveryOrder, DeliveryOrderEdit
from .repository import OrderRepository


class DeliveryOrderEditInline(admin.TabularInline):
    model           = DeliveryOrderEdit
    extra           = 0
    readonly_fields = ("field", "old_value", "new_value", "reason", "edited_by", "edited_at")
    can_delete      = False


@admin.register(DeliveryOrder)
class DeliveryOrderAdmin(admin.ModelAdmin):
    list_display    = ("order_number", "order_kind", "direction", "truck_no", "loading_point", "destination", "is_cancelled", "order_date")
    list_filter     = ("order_kind", "direction", "is_cancelled", "is_deleted")
    search_fields   = ("order_number", "truck_no", "client_name")
    readonly_fields = ("id", "sn", "order_number", "created_at", "updated_at", "last_edited_at", "last_edited_by")
    ordering        = ("-order_date", "-sn")
    inlines         = [DeliveryOrderEditInline]
    actions         = ["soft_delete_orders"]

    @admin.action(description="Soft-delete selected orders (no cascade)")
    def soft_delete_orders(self, request, queryset):
        repo  = OrderRepository()
        actor = Actor.from_user(request.user)
        for order in queryset.filter(is_deleted=False):
            repo.soft_delete(order, actor)
