import factory
from decimal import Decimal

from menu import models as menu_models
from .accounts import UserFactory


class RestaurantFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = menu_models.Restaurant

    name = factory.Sequence(lambda n: f"Restaurant {n}")
    cuisine = "Indian"
    address = ""
    description = ""
    is_active = True


class MenuItemFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = menu_models.MenuItem

    restaurant = factory.SubFactory(RestaurantFactory)
    name = factory.Sequence(lambda n: f"Item {n}")
    description = ""
    price = Decimal("50.00")
    is_available = True


class ReviewFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = menu_models.Review

    restaurant = factory.SubFactory(RestaurantFactory)
    user = factory.SubFactory(UserFactory)
    rating = 4
    comment = ""
