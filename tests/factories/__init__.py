from .accounts import UserFactory
from .menu import MenuItemFactory, RestaurantFactory, ReviewFactory
from .coupons import GiftCouponFactory
from .orders import OrderFactory, OrderItemFactory, OrderTrackingFactory

__all__ = [
    "UserFactory",
    "RestaurantFactory",
    "MenuItemFactory",
    "ReviewFactory",
    "GiftCouponFactory",
    "OrderFactory",
    "OrderItemFactory",
    "OrderTrackingFactory",
]
