from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.permissions import ROLE_ADMIN, IsAdminRole, user_has_role

from .models import LoyaltyProfile
from .serializers import LoyaltyPointsLedgerSerializer, LoyaltyProfileSerializer, PointsAdjustmentSerializer
from .services import LoyaltyAdjustmentError, adjust_points


class LoyaltyProfileViewSet(viewsets.ReadOnlyModelViewSet):
    """Customers see their own profile; admins see all and may adjust points."""

    serializer_class = LoyaltyProfileSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ["bonus_eligible", "bonus_used"]
    search_fields = ["user__username", "user__email"]
    ordering_fields = ["points", "updated_at"]
    ordering = ["-points"]

    def get_queryset(self):
        qs = LoyaltyProfile.objects.select_related("user").order_by("-points", "id")
        if user_has_role(self.request.user, ROLE_ADMIN):
            return qs
        return qs.filter(user=self.request.user)

    @extend_schema(request=PointsAdjustmentSerializer, responses=LoyaltyProfileSerializer)
    @action(detail=True, methods=["post"], permission_classes=[IsAdminRole])
    def adjust(self, request, pk=None):
        """Manual adjustment with reason. Body: {delta:int, reason:str, reference?:str}"""
        profile = self.get_object()
        ser = PointsAdjustmentSerializer(data=request.data)
        if not ser.is_valid():
            return Response({"ok": False, "error": ser.errors}, status=status.HTTP_400_BAD_REQUEST)
        try:
            profile = adjust_points(
                profile,
                ser.validated_data["delta"],
                ser.validated_data["reason"],
                by_user=request.user,
                reference=ser.validated_data.get("reference", ""),
            )
        except LoyaltyAdjustmentError as e:
            return Response({"ok": False, "error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(LoyaltyProfileSerializer(profile).data)

    @action(detail=True, methods=["get"])
    def ledger(self, request, pk=None):
        profile = self.get_object()
        ser = LoyaltyPointsLedgerSerializer(profile.ledger.all()[:200], many=True)
        return Response(ser.data)
