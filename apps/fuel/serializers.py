from rest_framework import serializers

from .balance import CHECKPOINT_FIELDS
from .models import FuelLedger, RouteConfig, TruckBatch
from .trucks import compact_truck_no


class FuelLedgerSerializer(serializers.ModelSerializer):
    waiting_behind = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model  = FuelLedger
        fields = [
            "id", "truck_no", "going_do_number", "return_do_number",
            "from_location", "to_location", "original_going_from", "original_going_to",
            "start_location", "journey_date",
            "total_liters", "extra_liters", "return_liters_added",
            *CHECKPOINT_FIELDS,
            "balance", "journey_status", "queue_order", "waiting_behind",
            "activated_at", "completed_at", "is_locked", "pending_config_reason",
            "is_cancelled", "cancelled_at", "cancellation_reason", "cancelled_by",
            "created_by", "created_at", "updated_at",
        ]
        read_only_fields = fields


class LedgerUpdateSerializer(serializers.Serializer):
    """Totals and checkpoints only; anything else in the body is reported back as invalid_field."""

    total_liters = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True, min_value=0)
    extra_liters = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True, min_value=0)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for name in CHECKPOINT_FIELDS:
            self.fields[name] = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)


class TruckJourneySerializer(serializers.Serializer):
    truck_no = serializers.CharField()
    active   = FuelLedgerSerializer(allow_null=True)
    queued   = FuelLedgerSerializer(many=True)


class RouteConfigSerializer(serializers.ModelSerializer):
    class Meta:
        model  = RouteConfig
        fields = ["id", "route_name", "origin", "destination", "destination_aliases",
                  "default_total_liters", "is_active", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_destination_aliases(self, value):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise serializers.ValidationError("Aliases must be a list of place names.")
        return [v.strip() for v in value if v.strip()]


class TruckBatchSerializer(serializers.ModelSerializer):
    class Meta:
        model  = TruckBatch
        fields = ["id", "truck_suffix", "extra_liters", "created_at"]
        read_only_fields = ["id", "created_at"]

    def validate_truck_suffix(self, value):
        suffix = compact_truck_no(value)
        if not suffix.isalpha():
            raise serializers.ValidationError("Suffix is the letter part of the plate, e.g. ABC.")
        return suffix
