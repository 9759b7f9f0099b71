from django.urls import include, path
from rest_framework.routers import SimpleRouter

from . import api_views

router = SimpleRouter()
router.register(r"menu-items", api_views.MenuItemViewSet, basename="menu-item")

urlpatterns = [
    path("search-items/", api_views.search_items, name="search-items"),
    path("", include(router.urls)),
]
