from rest_framework import serializers

from .models import MenuItem, Restaurant, Review


class RestaurantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Restaurant
        fields = ["id", "name", "cuisine", "address", "description", "image", "is_active"]


class MenuItemSerializer(serializers.ModelSerializer):
    restaurant_name = serializers.CharField(source="restaurant.name", read_only=True)

    class Meta:
        model = MenuItem
        fields = ["id", "restaurant", "restaurant_name", "name", "description", "price", "image_url", "is_available"]
        read_only_fields = fields


class ItemSearchResultSerializer(serializers.ModelSerializer):
    """Row shape of the global food search box."""

    item_id = serializers.IntegerField(source="id", read_only=True)
    restaurant_id = serializers.IntegerField(read_only=True)
    restaurant_name = serializers.CharField(source="restaurant.name", read_only=True)

    class Meta:
        model = MenuItem
        fields = ["item_id", "name", "price", "image_url", "restaurant_name", "restaurant_id"]
        read_only_fields = fields


class ReviewSerializer(serializers.ModelSerializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)

    class Meta:
        model = Review
        fields = ["id", "rating", "comment", "created_at"]
        read_only_fields = ["id", "created_at"]

    def validate_comment(self, value):
        return (value or "").strip()
