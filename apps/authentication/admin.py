from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import Operator


@admin.register(Operator)
class OperatorAdmin(BaseUserAdmin):
    list_display  = ("username", "full_name", "role", "station", "is_active", "created_at")
    list_filter   = ("role", "is_active", "station")
    search_fields = ("username", "full_name", "email")
    ordering      = ("-created_at",)
    fieldsets = (
        (None,          {"fields": ("username", "password")}),
        ("Personal",    {"fields": ("full_name", "email", "station")}),
        ("Role",        {"fields": ("role",)}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("username", "full_name", "role", "password1", "password2")}),
    )
