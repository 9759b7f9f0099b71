from __future__ import annotations

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from core.permissions import ROLE_ADMIN, user_has_role

from .signals import tracking_group


class OrderTrackingConsumer(AsyncJsonWebsocketConsumer):
    """
    Live status feed for one order. Only the order's owner and admins may
    subscribe; the payload carries the status and nothing else.
    """

    async def connect(self):
        self.order_id = self.scope["url_route"]["kwargs"]["order_id"]
        user = self.scope.get("user")
        if not await self._can_watch(user, self.order_id):
            await self.close(code=4403)
            return
        self.group_name = tracking_group(self.order_id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

    async def disconnect(self, close_code):
        group = getattr(self, "group_name", None)
        if group:
            await self.channel_layer.group_discard(group, self.channel_name)

    async def tracking_event(self, event):
        # event = {"type": "tracking_event", "data": {...}}
        await self.send_json(event.get("data", {}))

    @database_sync_to_async
    def _can_watch(self, user, order_id) -> bool:
        from .models import Order

        if not user or not getattr(user, "is_authenticated", False):
            return False
        if user_has_role(user, ROLE_ADMIN):
            return Order.objects.filter(pk=order_id).exists()
        return Order.objects.filter(pk=order_id, user=user).exists()
