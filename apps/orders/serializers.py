"""Delivery order serializers."""

from rest_framework import serializers

from apps.fuel.trucks import normalize_truck_no

from .models import DeliveryOrder, DeliveryOrderEdit


class DeliveryOrderEditSerializer(serializers.ModelSerializer):
    class Meta:
        model  = DeliveryOrderEdit
        fields = ["field", "old_value", "new_value", "reason", "edited_by", "edited_at"]


class DeliveryOrderSerializer(serializers.ModelSerializer):
    edit_history = DeliveryOrderEditSerializer(many=True, read_only=True)

    class Meta:
        model  = DeliveryOrder
        fields = [
            "id", "sn", "order_number", "order_date", "order_kind", "direction",
            "client_name", "truck_no", "trailer_no", "driver_name",
            "loading_point", "destination", "tonnages",
            "is_cancelled", "cancelled_at", "cancellation_reason", "cancelled_by",
            "created_by", "created_at", "last_edited_at", "last_edited_by",
            "edit_history",
        ]


class OrderCreateSerializer(serializers.Serializer):
    order_number  = serializers.CharField(max_length=20, required=False, allow_blank=True)
    order_date    = serializers.DateField(required=False)
    order_kind    = serializers.ChoiceField(choices=DeliveryOrder.Kind.choices, default=DeliveryOrder.Kind.DO)
    direction     = serializers.ChoiceField(choices=DeliveryOrder.Direction.choices)
    client_name   = serializers.CharField(max_length=120, required=False, allow_blank=True)
    truck_no      = serializers.CharField(max_length=20)
    trailer_no    = serializers.CharField(max_length=20, required=False, allow_blank=True)
    driver_name   = serializers.CharField(max_length=120, required=False, allow_blank=True)
    loading_point = serializers.CharField(max_length=80)
    destination   = serializers.CharField(max_length=80)
    tonnages      = serializers.DecimalField(max_digits=8, decimal_places=2, required=False, allow_null=True)

    def validate_truck_no(self, value):
        normalized = normalize_truck_no(value)
        if not normalized:
            raise serializers.ValidationError("Truck number is required.")
        return normalized

    def validate(self, data):
        if data["loading_point"].strip().upper() == data["destination"].strip().upper():
            raise serializers.ValidationError("Loading point and destination must differ.")
        return data


class OrderEditSerializer(serializers.Serializer):
    truck_no      = serializers.CharField(max_length=20, required=False)
    trailer_no    = serializers.CharField(max_length=20, required=False, allow_blank=True)
    loading_point = serializers.CharField(max_length=80, required=False)
    destination   = serializers.CharField(max_length=80, required=False)
    client_name   = serializers.CharField(max_length=120, required=False, allow_blank=True)
    driver_name   = serializers.CharField(max_length=120, required=False, allow_blank=True)
    tonnages      = serializers.DecimalField(max_digits=8, decimal_places=2, required=False, allow_null=True)
    reason        = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def validate(self, data):
        if not set(data) - {"reason"}:
            raise serializers.ValidationError("Nothing to change.")
        return data


class OrderCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255)
