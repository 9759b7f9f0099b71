from django.contrib import admin

from .models import MenuItem, Restaurant, Review


class MenuItemInline(admin.TabularInline):
    model = MenuItem
    extra = 0
    fields = ("name", "price", "is_available")


@admin.register(Restaurant)
class RestaurantAdmin(admin.ModelAdmin):
    list_display = ("name", "cuisine", "is_active", "created_at")
    list_filter = ("is_active", "cuisine")
    search_fields = ("name", "address")
    inlines = [MenuItemInline]


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ("name", "restaurant", "price", "is_available")
    list_filter = ("is_available", "restaurant")
    search_fields = ("name", "description")
    list_select_related = ("restaurant",)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("restaurant", "user", "rating", "created_at")
    list_filter = ("rating",)
    search_fields = ("comment", "restaurant__name", "user__username")
    raw_id_fields = ("user",)
