from django.contrib import admin

from .models import Order, OrderItem, OrderTracking


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    fields = ("item_name", "menu_item", "quantity", "price_each")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


class OrderTrackingInline(admin.StackedInline):
    model = OrderTracking
    extra = 0
    can_delete = False
    fields = ("status", "updated_at")
    readonly_fields = ("updated_at",)


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "restaurant", "total_amount", "payment_method", "coupon_code", "status_display", "created_at")
    list_filter = ("payment_method", "tracking__status", "created_at")
    search_fields = ("id", "user__username", "user__email", "coupon_code")
    list_select_related = ("user", "restaurant", "tracking")
    date_hierarchy = "created_at"
    # Amounts are settled at checkout
    readonly_fields = (
        "user",
        "restaurant",
        "subtotal",
        "discount",
        "gift_discount",
        "total_amount",
        "payment_method",
        "coupon_code",
        "points_earned",
        "created_at",
    )
    inlines = [OrderItemInline, OrderTrackingInline]

    @admin.display(description="Status", ordering="tracking__status")
    def status_display(self, obj: Order) -> str:
        return obj.status

    def has_add_permission(self, request):
        return False
