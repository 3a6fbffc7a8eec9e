"""Delivery order API views. Every mutation answers with the order and its cascade summary."""

import logging
from django.utils import timezone
from rest_framework import generics, status, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema
from django_filters.rest_framework import DjangoFilterBackend

from apps.authentication.context import Actor

from .mixins import DomainErrorMixin
from .models import DeliveryOrder
from .numbering import next_order_number
from .service import CascadeCoordinator
from . import serializers as sz

logger = logging.getLogger("fleetledger.orders")
coordinator = CascadeCoordinator()


def _outcome_response(outcome, status_code=status.HTTP_200_OK):
    return Response(
        {
            "order":   sz.DeliveryOrderSerializer(outcome.order).data,
            "cascade": outcome.cascade.as_dict(),
        },
        status=status_code,
    )


# ── GET/POST /api/orders/ ─────────────────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="List delivery orders or create one (opens / links its fuel ledger)")
class OrderListCreateView(DomainErrorMixin, generics.ListCreateAPIView):
    permission_classes = [permissions.IsAuthenticated]
    filter_backends    = [DjangoFilterBackend]
    filterset_fields   = ["order_kind", "direction", "truck_no", "is_cancelled"]

    def get_serializer_class(self):
        if self.request.method == "POST":
            return sz.OrderCreateSerializer
        return sz.DeliveryOrderSerializer

    def get_queryset(self):
        return DeliveryOrder.objects.filter(is_deleted=False).prefetch_related("edit_history")

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        outcome = coordinator.create_order(serializer.validated_data, Actor.from_user(request.user))
        return _outcome_response(outcome, status.HTTP_201_CREATED)


# ── GET/PATCH /api/orders/{id}/ ───────────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="Retrieve or edit a delivery order")
class OrderDetailView(DomainErrorMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, order_id):
        order = coordinator.orders.get(order_id)
        return Response(sz.DeliveryOrderSerializer(order).data)

    def patch(self, request, order_id):
        ser = sz.OrderEditSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        changes = dict(ser.validated_data)
        reason  = changes.pop("reason", "")
        outcome = coordinator.edit_order(order_id, changes, Actor.from_user(request.user), reason=reason)
        return _outcome_response(outcome)


# ── POST /api/orders/{id}/cancel/ ─────────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="Cancel a delivery order and cascade to ledger and LPO entries")
class OrderCancelView(DomainErrorMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, order_id):
        ser = sz.OrderCancelSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        outcome = coordinator.cancel_order(
            order_id, Actor.from_user(request.user), reason=ser.validated_data["reason"],
        )
        return _outcome_response(outcome)


# ── POST /api/orders/{id}/relink/ ─────────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="Link a return (EXPORT) order to its truck's open fuel ledger")
class OrderRelinkView(DomainErrorMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, order_id):
        outcome = coordinator.relink_return_order(order_id, Actor.from_user(request.user))
        return _outcome_response(outcome)


# ── GET /api/orders/next-number/ ──────────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="Preview the next order number for a kind and year")
class NextOrderNumberView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        kind = request.query_params.get("kind", DeliveryOrder.Kind.DO).upper()
        if kind not in DeliveryOrder.Kind.values:
            return Response({"error": f"Unknown order kind {kind}."}, status=400)
        try:
            year = int(request.query_params.get("year") or timezone.localdate().year)
        except ValueError:
            return Response({"error": "Year must be a number."}, status=400)
        sn, number = next_order_number(kind, year)
        return Response({"kind": kind, "year": year, "sn": sn, "order_number": number})


# ── GET /api/orders/truck/{truck_no}/ ─────────────────────────────────────────
@extend_schema(tags=["Orders"], summary="Delivery orders issued for a truck")
class TruckOrdersView(generics.ListAPIView):
    serializer_class   = sz.DeliveryOrderSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return coordinator.orders_for_truck(self.kwargs["truck_no"]).prefetch_related("edit_history")
