"""Fuel ledger, journey queue and fuel configuration API views."""

import logging
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema
from django_filters.rest_framework import DjangoFilterBackend

from apps.authentication.context import Actor
from apps.authentication.permissions import IsAdminTier
from apps.orders.mixins import DomainErrorMixin

from .models import FuelLedger, RouteConfig, TruckBatch
from .service import LedgerService
from . import serializers as sz

logger = logging.getLogger("fleetledger.fuel")
ledger_service = LedgerService()


class AdminWritesMixin:
    """Any authenticated operator reads; only the admin tier writes."""

    def get_permissions(self):
        if self.request.method in permissions.SAFE_METHODS:
            return [permissions.IsAuthenticated()]
        return [IsAdminTier()]


# ── GET /api/fuel/ledgers/ ────────────────────────────────────────────────────
@extend_schema(tags=["Fuel Ledgers"], summary="List fuel ledgers (filter by truck, status, lock)")
class LedgerListView(generics.ListAPIView):
    serializer_class   = sz.FuelLedgerSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends    = [DjangoFilterBackend]
    filterset_fields   = ["truck_no", "journey_status", "is_locked", "is_cancelled",
                          "going_do_number", "return_do_number"]

    def get_queryset(self):
        return FuelLedger.objects.filter(is_deleted=False)


# ── GET/PATCH /api/fuel/ledgers/{id}/ ─────────────────────────────────────────
@extend_schema(tags=["Fuel Ledgers"], summary="Retrieve a ledger or set its totals and checkpoints")
class LedgerDetailView(DomainErrorMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, ledger_id):
        ledger = ledger_service.ledgers.get(ledger_id)
        return Response(sz.FuelLedgerSerializer(ledger).data)

    def patch(self, request, ledger_id):
        ser = sz.LedgerUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        changes = dict(ser.validated_data)
        # Unknown keys go through so the service rejects them by name
        for key in set(request.data) - set(ser.fields):
            changes[key] = request.data[key]

        change = ledger_service.update_ledger(ledger_id, changes, Actor.from_user(request.user))
        report = change.report
        return Response({
            "ledger":   sz.FuelLedgerSerializer(change.ledger).data,
            "promoted": str(change.promoted.id) if change.promoted else None,
            "notifications_raised":   [str(n.id) for n in report.created] if report else [],
            "notifications_resolved": report.resolved if report else 0,
        })


# ── GET /api/fuel/trucks/{truck_no}/journey/ ──────────────────────────────────
@extend_schema(tags=["Journeys"], summary="Active journey and queue for a truck")
class TruckJourneyView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, truck_no):
        journey = ledger_service.journey_for_truck(truck_no)
        return Response(sz.TruckJourneySerializer(journey).data)


# ── POST /api/fuel/trucks/{truck_no}/activate-next/ ───────────────────────────
@extend_schema(tags=["Journeys"], summary="Promote the next queued journey on a truck with none active")
class ActivateNextJourneyView(DomainErrorMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, truck_no):
        ledger = ledger_service.activate_next_journey(truck_no, Actor.from_user(request.user))
        return Response(sz.FuelLedgerSerializer(ledger).data, status=status.HTTP_200_OK)


# ── Fuel configuration ────────────────────────────────────────────────────────
@extend_schema(tags=["Fuel Configuration"], summary="List or add route fuel volumes")
class RouteConfigListCreateView(AdminWritesMixin, generics.ListCreateAPIView):
    queryset         = RouteConfig.objects.all()
    serializer_class = sz.RouteConfigSerializer
    filter_backends  = [DjangoFilterBackend]
    filterset_fields = ["destination", "is_active"]

    def perform_create(self, serializer):
        route = serializer.save()
        logger.info("Route %s configured at %s L by %s", route.route_name, route.default_total_liters, self.request.user)


@extend_schema(tags=["Fuel Configuration"], summary="Retrieve, change or remove a route")
class RouteConfigDetailView(AdminWritesMixin, generics.RetrieveUpdateDestroyAPIView):
    queryset         = RouteConfig.objects.all()
    serializer_class = sz.RouteConfigSerializer


@extend_schema(tags=["Fuel Configuration"], summary="List or add truck batch extra fuel")
class TruckBatchListCreateView(AdminWritesMixin, generics.ListCreateAPIView):
    queryset         = TruckBatch.objects.all()
    serializer_class = sz.TruckBatchSerializer

    def perform_create(self, serializer):
        batch = serializer.save()
        logger.info("Truck batch %s set to +%s L by %s", batch.truck_suffix, batch.extra_liters, self.request.user)


@extend_schema(tags=["Fuel Configuration"], summary="Retrieve, change or remove a truck batch")
class TruckBatchDetailView(AdminWritesMixin, generics.RetrieveUpdateDestroyAPIView):
    queryset         = TruckBatch.objects.all()
    serializer_class = sz.TruckBatchSerializer
