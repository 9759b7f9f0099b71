from __future__ import annotations

import logging

from django.contrib import messages
from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_GET, require_http_methods

from loyalty.services import get_or_create_profile

from .serializers import SignupSerializer, resolve_username

logger = logging.getLogger(__name__)


def _safe_next(request: HttpRequest) -> str | None:
    nxt = request.POST.get("next") or request.GET.get("next")
    if nxt and url_has_allowed_host_and_scheme(nxt, allowed_hosts={request.get_host()}):
        return nxt
    return None


@require_http_methods(["GET", "POST"])
def signup(request: HttpRequest) -> HttpResponse:
    if request.method == "GET":
        return render(request, "accounts/signup.html")

    serializer = SignupSerializer(data=request.POST)
    if not serializer.is_valid():
        logger.info("Signup rejected: %s", serializer.errors)
        messages.error(request, "Signup failed. Try again.")
        return render(request, "accounts/signup.html", {"errors": serializer.errors, "form": request.POST}, status=400)

    user = serializer.save()
    logger.info("User %s signed up", user.pk)
    messages.success(request, "Account created. Please log in.")
    return redirect("accounts:login")


@require_http_methods(["GET", "POST"])
def login_view(request: HttpRequest) -> HttpResponse:
    if request.method == "GET":
        return render(request, "accounts/login.html", {"next": _safe_next(request) or ""})

    identifier = (request.POST.get("email") or request.POST.get("username") or "").strip()
    password = request.POST.get("password") or ""
    user = None
    if identifier and password:
        user = authenticate(request, username=resolve_username(identifier), password=password)
    if user is None:
        messages.error(request, "Invalid email or password.")
        return redirect("accounts:login")

    login(request, user)
    return redirect(_safe_next(request) or "menu:restaurants")


@require_http_methods(["GET", "POST"])
def logout_view(request: HttpRequest) -> HttpResponse:
    # Flushes the session, cart included
    logout(request)
    return redirect("accounts:login")


@login_required
@require_GET
def profile(request: HttpRequest) -> HttpResponse:
    loyalty = get_or_create_profile(request.user)
    return render(request, "accounts/profile.html", {"profile_user": request.user, "loyalty": loyalty})
