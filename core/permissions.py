from __future__ import annotations

from functools import wraps

from django.shortcuts import render
from rest_framework.permissions import BasePermission


ROLE_ADMIN = "Admin"
ROLE_CUSTOMER = "Customer"

ALL_ROLES = (ROLE_ADMIN, ROLE_CUSTOMER)


def user_in_group(user, group_name: str) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return user.groups.filter(name=group_name).exists()


def user_has_role(user, role: str) -> bool:
    """Staff accounts count as admins; everyone else needs the group."""
    if not user or not getattr(user, "is_authenticated", False):
        return False
    if role == ROLE_ADMIN and (user.is_staff or user.is_superuser):
        return True
    return user_in_group(user, role)


def role_required(role: str):
    """
    View decorator: 403 error page unless the user holds ``role``.

    Anonymous users get the same 403; use ``login_required`` in front of it
    when a login redirect is wanted instead.
    """

    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            if not user_has_role(request.user, role):
                return render(request, "error.html", {"message": "Access denied."}, status=403)
            return view_func(request, *args, **kwargs)

        return _wrapped

    return decorator


class IsAdminRole(BasePermission):
    """API access only for the Admin role."""

    message = "Access denied."

    def has_permission(self, request, view):
        return user_has_role(request.user, ROLE_ADMIN)
