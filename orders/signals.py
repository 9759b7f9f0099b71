from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import OrderTracking

logger = logging.getLogger(__name__)


def tracking_group(order_id) -> str:
    return f"order_{order_id}"


def _send(order_id, event: dict) -> None:
    layer = get_channel_layer()
    if layer is None:
        return
    try:
        async_to_sync(layer.group_send)(tracking_group(order_id), {"type": "tracking_event", "data": event})
    except Exception:
        # A broken channel layer must not undo a committed status change
        logger.exception("Tracking broadcast failed for order %s", order_id)


@receiver(post_save, sender=OrderTracking)
def tracking_broadcast(sender, instance: OrderTracking, created: bool, **kwargs):
    evt = {
        "event": "tracking_created" if created else "tracking_updated",
        "order_id": instance.order_id,
        "status": instance.status,
        "updated_at": instance.updated_at.isoformat() if instance.updated_at else None,
    }
    order_id = instance.order_id
    transaction.on_commit(lambda: _send(order_id, evt))
