from django.urls import include, path
from rest_framework.routers import SimpleRouter

from . import api_views

router = SimpleRouter()
router.register(r"orders", api_views.OrderViewSet, basename="order")
router.register(r"admin/orders", api_views.AdminOrderViewSet, basename="admin-order")

urlpatterns = [
    path("cart/", api_views.CartAPIView.as_view(), name="cart"),
    path("cart/<int:item_id>/", api_views.CartItemAPIView.as_view(), name="cart-item"),
    path("checkout/", api_views.CheckoutAPIView.as_view(), name="checkout"),
    path("", include(router.urls)),
]
