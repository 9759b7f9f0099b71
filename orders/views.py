# orders/views.py
from __future__ import annotations

import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from core.money import ZERO, q2
from core.permissions import ROLE_ADMIN, role_required, user_has_role
from core.views import render_error
from menu.models import MenuItem

from .cart import SessionCart
from .exceptions import CheckoutError
from .models import Order, OrderTracking
from .services import Receipt, build_checkout_preview, checkout, resolve_lines

logger = logging.getLogger(__name__)


def _is_ajax(request: HttpRequest) -> bool:
    if request.headers.get("HX-Request", "").lower() == "true":
        return True
    return request.headers.get("X-Requested-With", "").lower() == "xmlhttprequest"


# -----------------------------------------------------------------------------
# Cart
# -----------------------------------------------------------------------------

@login_required
@require_GET
def cart_view(request: HttpRequest) -> HttpResponse:
    cart = SessionCart.from_request(request)
    items = resolve_lines(cart.list(), strict=False)
    total = q2(sum((it.line_total for it in items), ZERO))
    return render(request, "orders/cart.html", {"cart_items": items, "total_amount": total})


@login_required
@require_POST
def cart_add(request: HttpRequest, item_id: int) -> HttpResponse:
    item = MenuItem.objects.filter(pk=item_id).only("id", "restaurant_id").first()
    if item is None:
        return render_error(request, "Failed to add to cart", status=404)

    cart = SessionCart.from_request(request)
    line = cart.add(item.pk, request.POST.get("quantity"), restaurant_id=item.restaurant_id)
    if _is_ajax(request):
        return JsonResponse({"ok": True, "item_id": line.item_id, "quantity": line.quantity, "cart_count": cart.item_count})
    return redirect("orders:cart")


@login_required
@require_http_methods(["GET", "POST"])
def cart_remove(request: HttpRequest, item_id: int) -> HttpResponse:
    cart = SessionCart.from_request(request)
    cart.remove(item_id)
    if _is_ajax(request):
        return JsonResponse({"ok": True, "cart_count": cart.item_count})
    return redirect("orders:cart")


# -----------------------------------------------------------------------------
# Checkout
# -----------------------------------------------------------------------------

@login_required
@require_http_methods(["GET", "POST"])
def checkout_view(request: HttpRequest) -> HttpResponse:
    cart = SessionCart.from_request(request)

    if request.method == "GET":
        if cart.is_empty:
            return render_error(request, "Your cart is empty!", status=200)
        preview = build_checkout_preview(request.user, cart)
        return render(
            request,
            "orders/checkout.html",
            {
                "preview": preview,
                "show_qr": request.GET.get("qr") == "1",
            },
        )

    try:
        result = checkout(
            request.user,
            cart,
            coupon_code=request.POST.get("coupon_code") or request.POST.get("couponCode"),
            payment_method=request.POST.get("payment_method") or request.POST.get("paymentMethod"),
        )
    except CheckoutError as exc:
        logger.info("Checkout rejected for user %s: %s", request.user.pk, exc.user_message)
        return render_error(request, exc.user_message, status=exc.status_code)

    if result.deferred:
        return redirect(f"{reverse('orders:checkout')}?qr=1")

    messages.success(request, f"Order #{result.order_id} placed.")
    return redirect("orders:order_success", order_id=result.order_id)


@login_required
@require_GET
def order_success(request: HttpRequest, order_id: int) -> HttpResponse:
    order = get_object_or_404(Order.objects.prefetch_related("items"), pk=order_id, user=request.user)
    return render(request, "orders/success.html", {"receipt": Receipt.from_order(order), "order": order})


# -----------------------------------------------------------------------------
# Order history / tracking
# -----------------------------------------------------------------------------

@login_required
@require_GET
def my_orders(request: HttpRequest) -> HttpResponse:
    orders = (
        Order.objects.filter(user=request.user)
        .select_related("restaurant", "tracking")
        .order_by("-created_at", "-id")
    )
    return render(request, "orders/my_orders.html", {"orders": orders})


@login_required
@require_GET
def track_order(request: HttpRequest, order_id: int) -> HttpResponse:
    qs = Order.objects.select_related("tracking", "restaurant").prefetch_related("items")
    if not user_has_role(request.user, ROLE_ADMIN):
        qs = qs.filter(user=request.user)
    order = qs.filter(pk=order_id).first()
    if order is None:
        return render(request, "orders/track_order.html", {"not_found": True}, status=404)
    return render(request, "orders/track_order.html", {"order": order, "not_found": False})


# -----------------------------------------------------------------------------
# Admin
# -----------------------------------------------------------------------------

@login_required
@role_required(ROLE_ADMIN)
@require_GET
def admin_orders(request: HttpRequest) -> HttpResponse:
    orders = Order.objects.select_related("user", "restaurant", "tracking").order_by("-created_at", "-id")
    status = (request.GET.get("status") or "").strip()
    if status:
        orders = orders.filter(tracking__status=status)
    return render(
        request,
        "orders/admin_orders.html",
        {"orders": orders, "statuses": OrderTracking.STATUS_CHOICES, "current_status": status},
    )


@login_required
@role_required(ROLE_ADMIN)
@require_POST
def admin_update_status(request: HttpRequest, order_id: int) -> HttpResponse:
    order = get_object_or_404(Order, pk=order_id)
    status = (request.POST.get("status") or "").strip()
    if status not in OrderTracking.VALID_STATUSES:
        return render_error(request, "Failed to update status", status=400)

    tracking, _ = OrderTracking.objects.get_or_create(order=order)
    tracking.set_status(status)
    logger.info("Order %s status set to %s by user %s", order.pk, status, request.user.pk)
    return redirect("orders:admin_orders")
