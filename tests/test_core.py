import logging
from decimal import Decimal

import pytest
from django.contrib.auth.models import AnonymousUser, Group
from django.core.management import call_command

from core.middleware.request_id import RequestIDFilter
from core.money import q2
from core.permissions import ROLE_ADMIN, ROLE_CUSTOMER, user_has_role
from tests.factories import UserFactory


@pytest.mark.parametrize(
    "raw,expected",
    [("1.005", "1.01"), (2.675, "2.68"), (None, "0.00"), ("junk", "0.00"), (Decimal("10"), "10.00")],
)
def test_q2_rounds_half_up(raw, expected):
    assert q2(raw) == Decimal(expected)


@pytest.mark.django_db
def test_role_checks():
    customer = UserFactory()
    staff = UserFactory(is_staff=True)
    manager = UserFactory()
    manager.groups.add(Group.objects.create(name=ROLE_ADMIN))

    assert not user_has_role(customer, ROLE_ADMIN)
    assert user_has_role(staff, ROLE_ADMIN)
    assert user_has_role(manager, ROLE_ADMIN)
    assert not user_has_role(AnonymousUser(), ROLE_ADMIN)


@pytest.mark.django_db
def test_seed_roles_creates_groups_and_admin():
    call_command("seed_roles", "--create-admin", "--email", "Boss@Example.com", "--password", "pw-123456!")

    assert set(Group.objects.values_list("name", flat=True)) >= {ROLE_ADMIN, ROLE_CUSTOMER}
    admin = Group.objects.get(name=ROLE_ADMIN).user_set.get()
    assert admin.username == "boss@example.com"
    assert admin.check_password("pw-123456!")
    assert user_has_role(admin, ROLE_ADMIN)


def test_request_id_filter_outside_request():
    record = logging.LogRecord("orders", logging.INFO, __file__, 1, "msg", None, None)
    assert RequestIDFilter().filter(record) is True
    assert record.request_id == "no-request-id"
