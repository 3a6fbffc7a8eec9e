"""
Authentication models.
Operator is the custom User; its role drives notification targeting and admin-only endpoints.
"""

import uuid
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager


class OperatorManager(BaseUserManager):
    def create_user(self, username, password=None, **extra):
        if not username:
            raise ValueError("Username is required.")
        user = self.model(username=username, **extra)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password, **extra):
        extra.setdefault("is_staff", True)
        extra.setdefault("is_superuser", True)
        extra.setdefault("role", Operator.Role.SUPER_ADMIN)
        return self.create_user(username, password, **extra)


class Operator(AbstractBaseUser, PermissionsMixin):
    """Every back-office user: clerks, fuel order makers, managers and admins."""

    class Role(models.TextChoices):
        SUPER_ADMIN      = "super_admin",      "Super Admin"
        ADMIN            = "admin",            "Admin"
        MANAGER          = "manager",          "Manager"
        SUPERVISOR       = "supervisor",       "Supervisor"
        CLERK            = "clerk",            "Clerk"
        FUEL_ORDER_MAKER = "fuel_order_maker", "Fuel Order Maker"
        DRIVER           = "driver",           "Driver"
        VIEWER           = "viewer",           "Viewer"

    ADMIN_TIER = (Role.SUPER_ADMIN, Role.ADMIN)

    id         = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username   = models.CharField(max_length=60, unique=True)
    full_name  = models.CharField(max_length=120, blank=True)
    email      = models.EmailField(blank=True)
    role       = models.CharField(max_length=20, choices=Role.choices, default=Role.VIEWER)
    station    = models.CharField(max_length=60, blank=True)
    is_active  = models.BooleanField(default=True)
    is_staff   = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    USERNAME_FIELD  = "username"
    REQUIRED_FIELDS = ["full_name"]

    objects = OperatorManager()

    class Meta:
        verbose_name = "Operator"
        indexes = [models.Index(fields=["role"], name="auth_operator_role_idx")]

    def __str__(self):
        return f"{self.username} ({self.role})"

    @property
    def is_admin_tier(self) -> bool:
        return self.role in self.ADMIN_TIER
