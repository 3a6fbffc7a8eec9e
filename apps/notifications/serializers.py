from rest_framework import serializers
from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model  = Notification
        fields = [
            "id", "type", "title", "message", "related_model", "related_id",
            "metadata", "recipients", "status", "is_read", "read_by",
            "resolved_at", "resolved_by", "created_by", "created_at",
        ]
        read_only_fields = fields
