"""Authentication: operator accounts and profile."""

from django.contrib.auth import get_user_model
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import serializers
from drf_spectacular.utils import extend_schema

from .permissions import IsAdminTier

Operator = get_user_model()


# ── Serializers ───────────────────────────────────────────────────────────────
class OperatorCreateSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8)

    class Meta:
        model  = Operator
        fields = ["username", "full_name", "email", "role", "station", "password"]

    def create(self, validated_data):
        password = validated_data.pop("password")
        operator = Operator(**validated_data)
        operator.set_password(password)
        operator.save()
        return operator


class OperatorProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model  = Operator
        fields = ["id", "username", "full_name", "email", "role", "station", "created_at"]
        read_only_fields = ["id", "username", "role", "created_at"]


# ── Views ─────────────────────────────────────────────────────────────────────
@extend_schema(tags=["Auth"])
class OperatorCreateView(generics.CreateAPIView):
    """POST /api/auth/operators/: admin creates an operator account."""
    queryset           = Operator.objects.all()
    serializer_class   = OperatorCreateSerializer
    permission_classes = [IsAdminTier]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        operator = serializer.save()
        return Response(
            {"message": "Operator created.", "id": str(operator.id)},
            status=status.HTTP_201_CREATED,
        )


@extend_schema(tags=["Auth"])
class ProfileView(generics.RetrieveUpdateAPIView):
    """GET/PATCH /api/auth/me/: retrieve or update own profile."""
    serializer_class   = OperatorProfileSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        return self.request.user
