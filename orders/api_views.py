# orders/api_views.py
from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.money import ZERO, q2
from core.permissions import IsAdminRole
from menu.models import MenuItem

from .cart import SessionCart
from .exceptions import CheckoutError
from .filters import AdminOrderFilter
from .models import Order, OrderTracking
from .serializers import (
    CartLineInputSerializer,
    CartSerializer,
    CheckoutRequestSerializer,
    OrderSerializer,
    ReceiptSerializer,
    TrackingSerializer,
    TrackingUpdateSerializer,
)
from .services import checkout, resolve_lines

logger = logging.getLogger(__name__)


def _cart_payload(cart: SessionCart) -> dict:
    items = resolve_lines(cart.list(), strict=False)
    return CartSerializer(
        {
            "lines": items,
            "item_count": sum(it.quantity for it in items),
            "subtotal": q2(sum((it.line_total for it in items), ZERO)),
        }
    ).data


class CartAPIView(APIView):
    """Session cart as JSON; same cart the storefront pages use."""

    permission_classes = [IsAuthenticated]

    @extend_schema(responses=CartSerializer)
    def get(self, request, *args, **kwargs):
        return Response(_cart_payload(SessionCart.from_request(request)))

    @extend_schema(request=CartLineInputSerializer, responses=CartSerializer)
    def post(self, request, *args, **kwargs):
        ser = CartLineInputSerializer(data=request.data)
        if not ser.is_valid():
            return Response({"ok": False, "error": ser.errors}, status=status.HTTP_400_BAD_REQUEST)
        item = MenuItem.objects.filter(pk=ser.validated_data["item_id"]).only("id", "restaurant_id").first()
        if item is None:
            return Response({"ok": False, "error": "Menu item not found"}, status=status.HTTP_404_NOT_FOUND)
        cart = SessionCart.from_request(request)
        cart.add(item.pk, ser.validated_data.get("quantity"), restaurant_id=item.restaurant_id)
        return Response(_cart_payload(cart), status=status.HTTP_201_CREATED)


class CartItemAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses=CartSerializer)
    def delete(self, request, item_id: int, *args, **kwargs):
        cart = SessionCart.from_request(request)
        cart.remove(item_id)
        return Response(_cart_payload(cart))


class CheckoutAPIView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=CheckoutRequestSerializer, responses=ReceiptSerializer)
    def post(self, request, *args, **kwargs):
        ser = CheckoutRequestSerializer(data=request.data)
        if not ser.is_valid():
            return Response({"ok": False, "error": ser.errors}, status=status.HTTP_400_BAD_REQUEST)
        try:
            result = checkout(
                request.user,
                SessionCart.from_request(request),
                coupon_code=ser.validated_data.get("coupon_code"),
                payment_method=ser.validated_data.get("payment_method"),
            )
        except CheckoutError as exc:
            return Response({"ok": False, "error": exc.user_message}, status=exc.status_code)

        if result.deferred:
            return Response({"ok": True, "deferred": True}, status=status.HTTP_202_ACCEPTED)
        return Response(
            {"ok": True, "deferred": False, "receipt": ReceiptSerializer(result.receipt).data},
            status=status.HTTP_201_CREATED,
        )


class OrderViewSet(viewsets.ReadOnlyModelViewSet):
    """The current user's own orders, newest first."""

    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return (
            Order.objects.filter(user=self.request.user)
            .select_related("restaurant", "tracking")
            .prefetch_related("items")
            .order_by("-created_at", "-id")
        )


class AdminOrderViewSet(viewsets.ReadOnlyModelViewSet):
    """All orders for the Admin role, filterable by tracking status."""

    serializer_class = OrderSerializer
    permission_classes = [IsAdminRole]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = AdminOrderFilter
    ordering_fields = ["created_at", "total_amount"]
    ordering = ["-created_at"]

    def get_queryset(self):
        return Order.objects.select_related("restaurant", "tracking", "user").prefetch_related("items")

    @extend_schema(request=TrackingUpdateSerializer, responses=TrackingSerializer)
    @action(detail=True, methods=["patch"], url_path="tracking")
    def tracking(self, request, pk=None):
        order = get_object_or_404(Order, pk=pk)
        ser = TrackingUpdateSerializer(data=request.data)
        if not ser.is_valid():
            return Response({"ok": False, "error": ser.errors}, status=status.HTTP_400_BAD_REQUEST)
        tracking, _ = OrderTracking.objects.get_or_create(order=order)
        tracking.set_status(ser.validated_data["status"])
        logger.info("Order %s status set to %s by user %s via API", order.pk, tracking.status, request.user.pk)
        return Response(TrackingSerializer(tracking).data)
