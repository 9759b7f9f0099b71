from django.urls import path

from .consumers import OrderTrackingConsumer

websocket_urlpatterns = [
    path("ws/orders/<int:order_id>/", OrderTrackingConsumer.as_asgi()),
]
