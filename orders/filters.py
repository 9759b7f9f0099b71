import django_filters

from .models import Order, OrderTracking


class AdminOrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(field_name="tracking__status", choices=OrderTracking.STATUS_CHOICES)
    payment_method = django_filters.CharFilter(field_name="payment_method", lookup_expr="iexact")
    restaurant = django_filters.NumberFilter(field_name="restaurant_id")
    created_after = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_before = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "payment_method", "restaurant", "user"]
