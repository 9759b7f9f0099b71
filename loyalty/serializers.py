from __future__ import annotations

from rest_framework import serializers

from .models import LoyaltyPointsLedger, LoyaltyProfile


class LoyaltyPointsLedgerSerializer(serializers.ModelSerializer):
    class Meta:
        model = LoyaltyPointsLedger
        fields = ["id", "profile", "delta", "type", "reason", "reference", "created_by", "created_at"]
        read_only_fields = fields


class LoyaltyProfileSerializer(serializers.ModelSerializer):
    bonus_available = serializers.BooleanField(read_only=True)

    class Meta:
        model = LoyaltyProfile
        fields = ["id", "user", "points", "bonus_eligible", "bonus_used", "bonus_available", "updated_at"]
        read_only_fields = fields


class PointsAdjustmentSerializer(serializers.Serializer):
    delta = serializers.IntegerField()
    reason = serializers.CharField(max_length=200)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
