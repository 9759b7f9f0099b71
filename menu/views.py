from __future__ import annotations

import logging

from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_GET, require_POST

from core.views import render_error

from .models import Restaurant
from .serializers import ReviewSerializer

logger = logging.getLogger(__name__)


@login_required
@require_GET
def restaurants(request: HttpRequest) -> HttpResponse:
    qs = Restaurant.objects.filter(is_active=True).order_by("name", "id")
    return render(request, "menu/restaurants.html", {"restaurants": qs})


@login_required
@require_GET
def restaurant_menu(request: HttpRequest, restaurant_id: int) -> HttpResponse:
    restaurant = Restaurant.objects.filter(pk=restaurant_id).first()
    if restaurant is None:
        return render_error(request, "Restaurant not found", status=404)

    items = restaurant.menu_items.filter(is_available=True).order_by("name", "id")
    reviews = restaurant.reviews.select_related("user").order_by("-created_at", "-id")
    avg = restaurant.average_rating()
    return render(
        request,
        "menu/menu.html",
        {
            "restaurant": restaurant,
            "menu": items,
            "reviews": reviews,
            "avg_rating": avg if avg is not None else "No ratings yet",
        },
    )


@login_required
@require_POST
def submit_review(request: HttpRequest, restaurant_id: int) -> HttpResponse:
    restaurant = get_object_or_404(Restaurant, pk=restaurant_id)
    serializer = ReviewSerializer(data=request.POST)
    if not serializer.is_valid():
        logger.info("Review rejected for restaurant %s: %s", restaurant.pk, serializer.errors)
        return render_error(request, "Failed to submit review", status=400)
    serializer.save(restaurant=restaurant, user=request.user)
    return redirect("menu:restaurant_menu", restaurant_id=restaurant.pk)
