from django.urls import path

from . import views

app_name = "orders"

urlpatterns = [
    path("cart/", views.cart_view, name="cart"),
    path("cart/add/<int:item_id>/", views.cart_add, name="cart_add"),
    path("cart/remove/<int:item_id>/", views.cart_remove, name="cart_remove"),
    path("checkout/", views.checkout_view, name="checkout"),
    path("orders/<int:order_id>/success/", views.order_success, name="order_success"),
    path("my-orders/", views.my_orders, name="my_orders"),
    path("track-order/<int:order_id>/", views.track_order, name="track_order"),
    path("manage/orders/", views.admin_orders, name="admin_orders"),
    path("manage/orders/<int:order_id>/status/", views.admin_update_status, name="admin_update_status"),
]
