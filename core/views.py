from __future__ import annotations

from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET


def render_error(request: HttpRequest, message: str, status: int = 400) -> HttpResponse:
    return render(request, "error.html", {"message": message}, status=status)


@require_GET
def home(request: HttpRequest) -> HttpResponse:
    return redirect("menu:restaurants")


@require_GET
def landing(request: HttpRequest) -> HttpResponse:
    return render(request, "home.html")


def http_404(request: HttpRequest, exception=None) -> HttpResponse:
    return render_error(request, "Page not found", status=404)
