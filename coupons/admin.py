from __future__ import annotations

from django.contrib import admin

from .models import GiftCoupon


@admin.register(GiftCoupon)
class GiftCouponAdmin(admin.ModelAdmin):
    list_display = ("code", "user", "discount_amount", "is_scratched", "is_used", "used_at", "created_at")
    list_filter = ("is_used", "is_scratched", "code")
    search_fields = ("code", "user__username", "user__email")
    raw_id_fields = ("user",)
    readonly_fields = ("used_at", "created_at")

    fieldsets = (
        (None, {"fields": ("user", "code", "discount_amount")}),
        ("State", {"fields": ("is_scratched", "is_used", "used_at")}),
        ("Meta", {"fields": ("created_at",)}),
    )
