import pytest
from django.contrib.auth.models import Group
from django.test import Client
from rest_framework.test import APIClient

from core.permissions import ROLE_ADMIN
from tests.factories import UserFactory


@pytest.fixture
def api_client() -> APIClient:
    """Unauthenticated DRF APIClient.

    Session-backed endpoints (cart, checkout) need ``force_login`` rather than
    ``force_authenticate`` so the session cookie carries the cart.
    """
    return APIClient(enforce_csrf_checks=False)


@pytest.fixture
def user(db):
    """A persisted customer."""
    return UserFactory(username="testuser", email="test@example.com")


@pytest.fixture
def admin_user(db):
    """A non-staff user who holds the Admin role through its group."""
    admin = UserFactory(username="manager", email="manager@example.com")
    group, _ = Group.objects.get_or_create(name=ROLE_ADMIN)
    admin.groups.add(group)
    return admin


@pytest.fixture
def auth_api_client(api_client: APIClient, user):
    """APIClient logged in as ``user`` with a real session."""
    api_client.force_login(user)
    return api_client


@pytest.fixture
def admin_api_client(admin_user) -> APIClient:
    client = APIClient(enforce_csrf_checks=False)
    client.force_login(admin_user)
    return client


@pytest.fixture
def auth_client(user) -> Client:
    """Django test client for server-rendered pages."""
    client = Client()
    client.force_login(user)
    return client


@pytest.fixture
def admin_client_role(admin_user) -> Client:
    client = Client()
    client.force_login(admin_user)
    return client


@pytest.fixture
def session() -> dict:
    """Plain mapping standing in for ``request.session`` in cart unit tests."""
    return {}
