# foodiehub_backend/urls.py
from __future__ import annotations

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from core.views import home, landing

urlpatterns = [
    path("", home, name="home"),
    path("home/", landing, name="landing"),

    # Server-rendered pages
    path("", include(("accounts.urls", "accounts"), namespace="accounts")),
    path("", include(("menu.urls", "menu"), namespace="menu")),
    path("", include(("orders.urls", "orders"), namespace="orders")),
    path("gift-coupons/", include(("coupons.urls", "coupons"), namespace="coupons")),

    # Django default admin interface
    path("admin/", admin.site.urls),

    # API Documentation
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    # ---- REST APIs ----
    path("api/", include(("menu.api_urls", "menu_api"), namespace="menu_api")),
    path("api/", include(("orders.api_urls", "orders_api"), namespace="orders_api")),
    path("api/", include(("coupons.api_urls", "coupons_api"), namespace="coupons_api")),
    path("api/", include(("loyalty.api_urls", "loyalty_api"), namespace="loyalty_api")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

handler404 = "core.views.http_404"
