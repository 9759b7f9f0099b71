from decimal import Decimal

from rest_framework import serializers

from .models import GiftCoupon


class GiftCouponSerializer(serializers.ModelSerializer):
    discount = serializers.DecimalField(source="discount_amount", max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = GiftCoupon
        fields = ["id", "code", "discount", "is_scratched", "is_used", "used_at", "created_at"]
        read_only_fields = fields


class ScratchResultSerializer(serializers.ModelSerializer):
    discount = serializers.DecimalField(source="discount_amount", max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = GiftCoupon
        fields = ["code", "discount"]
        read_only_fields = fields


class CouponPreviewRequestSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0.00"))
    coupon_code = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=32)


class CouponPreviewSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2)
    coupon_code = serializers.CharField(allow_blank=True)
    is_first_order = serializers.BooleanField()
    discount = serializers.DecimalField(max_digits=10, decimal_places=2)
    label = serializers.CharField(allow_null=True)
    total_after_discount = serializers.DecimalField(max_digits=10, decimal_places=2)
