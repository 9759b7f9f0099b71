from __future__ import annotations

from django.contrib import admin

from .models import LoyaltyPointsLedger, LoyaltyProfile


class LedgerInline(admin.TabularInline):
    model = LoyaltyPointsLedger
    fk_name = "profile"
    extra = 0
    can_delete = False
    fields = ("created_at", "type", "delta", "reason", "reference", "created_by")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(LoyaltyProfile)
class LoyaltyProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "points", "bonus_eligible", "bonus_used", "updated_at")
    list_filter = ("bonus_eligible", "bonus_used")
    search_fields = ("user__username", "user__email")
    raw_id_fields = ("user",)
    # Balances change through the ledger only
    readonly_fields = ("points", "updated_at")
    inlines = [LedgerInline]


@admin.register(LoyaltyPointsLedger)
class LoyaltyPointsLedgerAdmin(admin.ModelAdmin):
    list_display = ("profile", "type", "delta", "reason", "reference", "created_at")
    list_filter = ("type",)
    search_fields = ("reason", "reference", "profile__user__username")
    raw_id_fields = ("profile", "created_by")
