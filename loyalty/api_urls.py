from django.urls import include, path
from rest_framework.routers import SimpleRouter

from . import api_views

router = SimpleRouter()
router.register(r"loyalty/profiles", api_views.LoyaltyProfileViewSet, basename="loyalty-profile")

urlpatterns = [
    path("", include(router.urls)),
]
