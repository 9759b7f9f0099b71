from __future__ import annotations

from rest_framework import serializers

from .models import Order, OrderItem, OrderTracking


class CartLineInputSerializer(serializers.Serializer):
    item_id = serializers.IntegerField(min_value=1)
    # Coerced to 1 by the cart when missing or not a positive integer
    quantity = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ResolvedLineSerializer(serializers.Serializer):
    item_id = serializers.IntegerField()
    name = serializers.CharField()
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    quantity = serializers.IntegerField()
    restaurant_id = serializers.IntegerField(allow_null=True)
    line_total = serializers.DecimalField(max_digits=10, decimal_places=2)


class CartSerializer(serializers.Serializer):
    lines = ResolvedLineSerializer(many=True)
    item_count = serializers.IntegerField()
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2)


class CheckoutRequestSerializer(serializers.Serializer):
    coupon_code = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=32)
    payment_method = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=8)


class ReceiptSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    items = ResolvedLineSerializer(many=True)
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2)
    coupon_label = serializers.CharField(allow_null=True)
    discount_total = serializers.DecimalField(max_digits=10, decimal_places=2)
    gift_discount = serializers.DecimalField(max_digits=10, decimal_places=2)
    points_earned = serializers.IntegerField()
    final_amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    payment_method = serializers.CharField()


class OrderItemSerializer(serializers.ModelSerializer):
    line_total = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "menu_item", "item_name", "quantity", "price_each", "line_total"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    restaurant_name = serializers.CharField(source="restaurant.name", read_only=True, default=None)
    status = serializers.CharField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "user",
            "restaurant",
            "restaurant_name",
            "subtotal",
            "discount",
            "gift_discount",
            "total_amount",
            "payment_method",
            "coupon_code",
            "points_earned",
            "status",
            "created_at",
            "items",
        ]
        read_only_fields = fields


class TrackingUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderTracking.STATUS_CHOICES)


class TrackingSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderTracking
        fields = ["order", "status", "updated_at"]
        read_only_fields = fields


