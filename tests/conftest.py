"""Shared fixtures: operators, API clients, fuel configuration and a ready coordinator."""

import uuid
from datetime import date
from decimal import Decimal

import pytest


@pytest.fixture
def api_client():
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def make_operator(db):
    from django.contrib.auth import get_user_model
    Operator = get_user_model()

    def _make(username=None, role="fuel_order_maker", **kwargs):
        username = username or f"op-{uuid.uuid4().hex[:8]}"
        return Operator.objects.create_user(
            username=username, password="Test@1234",
            full_name=kwargs.get("full_name", "Test Operator"),
            role=role,
        )
    return _make


@pytest.fixture
def clerk(make_operator):
    return make_operator(username="amina", role="fuel_order_maker", full_name="Amina Fuel")


@pytest.fixture
def admin(make_operator):
    return make_operator(username="baraka", role="admin", full_name="Baraka Admin")


@pytest.fixture
def clerk_actor(clerk):
    from apps.authentication.context import Actor
    return Actor.from_user(clerk)


@pytest.fixture
def admin_actor(admin):
    from apps.authentication.context import Actor
    return Actor.from_user(admin)


@pytest.fixture
def auth_client(api_client, clerk):
    api_client.force_authenticate(user=clerk)
    return api_client


@pytest.fixture
def admin_client(admin):
    from rest_framework.test import APIClient
    client = APIClient()
    client.force_authenticate(user=admin)
    return client


@pytest.fixture
def routes(db):
    """DAR → ZAMBIA going (1000 L), ZAMBIA → DAR return (800 L), DAR → MSA (900 L)."""
    from apps.fuel.models import RouteConfig
    going  = RouteConfig.objects.create(route_name="Dar - Zambia", origin="DAR", destination="ZAMBIA",
                                        default_total_liters=Decimal("1000"))
    back   = RouteConfig.objects.create(route_name="Zambia - Dar", origin="ZAMBIA", destination="DAR",
                                        destination_aliases=["DAR ES SALAAM"],
                                        default_total_liters=Decimal("800"))
    msa    = RouteConfig.objects.create(route_name="Dar - Mombasa", origin="DAR", destination="MSA",
                                        destination_aliases=["MOMBASA"],
                                        default_total_liters=Decimal("900"))
    return going, back, msa


@pytest.fixture
def batch(db):
    from apps.fuel.models import TruckBatch
    return TruckBatch.objects.create(truck_suffix="ABC", extra_liters=Decimal("50"))


@pytest.fixture
def coordinator(db):
    from apps.orders.service import CascadeCoordinator
    return CascadeCoordinator()


@pytest.fixture
def order_data():
    """Order payload builder; defaults to a DAR → ZAMBIA going DO for T100 ABC."""
    def _data(**overrides):
        data = {
            "order_kind":    "DO",
            "direction":     "IMPORT",
            "order_date":    date(2026, 3, 2),
            "client_name":   "Copperbelt Mining",
            "truck_no":      "T100 ABC",
            "loading_point": "DAR",
            "destination":   "ZAMBIA",
        }
        data.update(overrides)
        return data
    return _data
