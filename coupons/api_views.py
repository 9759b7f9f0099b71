from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.money import q2
from orders.models import Order

from .models import GiftCoupon
from .serializers import CouponPreviewRequestSerializer, CouponPreviewSerializer, GiftCouponSerializer
from .services import compute_discount, normalize_code


class CouponPreviewView(APIView):
    """
    Preview what a coupon code would take off a subtotal for the current user.
    Nothing is stored; first-order status comes from the user's order history.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(request=CouponPreviewRequestSerializer, responses=CouponPreviewSerializer)
    def post(self, request, *args, **kwargs):
        ser = CouponPreviewRequestSerializer(data=request.data)
        if not ser.is_valid():
            return Response({"ok": False, "error": ser.errors}, status=status.HTTP_400_BAD_REQUEST)

        subtotal = q2(ser.validated_data["subtotal"])
        code = normalize_code(ser.validated_data.get("coupon_code"))
        is_first_order = not Order.objects.filter(user=request.user).exists()
        result = compute_discount(subtotal, code, is_first_order)

        out = CouponPreviewSerializer(
            {
                "subtotal": subtotal,
                "coupon_code": code,
                "is_first_order": is_first_order,
                "discount": result.discount,
                "label": result.label,
                "total_after_discount": q2(subtotal - result.discount),
            }
        )
        return Response(out.data)


class GiftCouponListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = GiftCouponSerializer
    pagination_class = None

    def get_queryset(self):
        return GiftCoupon.objects.filter(user=self.request.user).order_by("-created_at", "-id")
