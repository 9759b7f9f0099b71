from __future__ import annotations

from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import render
from django.views.decorators.http import require_GET, require_POST

from .models import GiftCoupon
from .serializers import ScratchResultSerializer
from .services import scratch_gift_coupon


@login_required
@require_GET
def gift_coupons(request: HttpRequest) -> HttpResponse:
    coupons = GiftCoupon.objects.filter(user=request.user).order_by("-created_at", "-id")
    return render(request, "coupons/gift_coupons.html", {"coupons": coupons})


@login_required
@require_POST
def scratch(request: HttpRequest) -> JsonResponse:
    """Reveal a new scratch card; the JSON drives the page animation."""
    coupon = scratch_gift_coupon(request.user)
    return JsonResponse(ScratchResultSerializer(coupon).data)
