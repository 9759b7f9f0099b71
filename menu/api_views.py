from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import api_view, permission_classes
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from .models import MenuItem
from .serializers import ItemSearchResultSerializer, MenuItemSerializer

SEARCH_LIMIT = 20


class MenuItemViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only items list/detail.
    Supports filters: restaurant, is_available; search on name/description.
    """

    permission_classes = [AllowAny]
    serializer_class = MenuItemSerializer
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields = ["restaurant", "is_available"]
    search_fields = ["name", "description"]
    ordering_fields = ["name", "price", "created_at"]
    ordering = ["name"]

    def get_queryset(self):
        return MenuItem.objects.select_related("restaurant").filter(restaurant__is_active=True)


@extend_schema(
    parameters=[OpenApiParameter("q", str, description="Substring of the item name")],
    responses=ItemSearchResultSerializer(many=True),
)
@api_view(["GET"])
@permission_classes([AllowAny])
def search_items(request: Request) -> Response:
    """Global food search: first 20 items whose name contains ``q``."""
    q = (request.query_params.get("q") or "").strip()
    qs = MenuItem.objects.select_related("restaurant").order_by("name", "id")
    if q:
        qs = qs.filter(name__icontains=q)
    return Response(ItemSearchResultSerializer(qs[:SEARCH_LIMIT], many=True).data)
