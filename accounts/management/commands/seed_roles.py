from __future__ import annotations

from typing import Dict, Iterable, List

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group, Permission
from django.contrib.contenttypes.models import ContentType
from django.core.management.base import BaseCommand

from core.permissions import ALL_ROLES, ROLE_ADMIN


def ensure_group(name: str) -> Group:
    g, _ = Group.objects.get_or_create(name=name)
    return g


def model_perms(app_label: str, model: str, actions: Iterable[str]) -> List[Permission]:
    try:
        ct = ContentType.objects.get(app_label=app_label, model=model)
    except ContentType.DoesNotExist:
        return []
    codenames = [f"{action}_{model}" for action in actions]
    return list(Permission.objects.filter(content_type=ct, codename__in=codenames))


def seed_permissions() -> Dict[str, Group]:
    groups = {name: ensure_group(name) for name in ALL_ROLES}

    admin_perms: List[Permission] = []
    for m in ("order", "orderitem", "ordertracking"):
        admin_perms += model_perms("orders", m, ("view", "change"))
    for m in ("restaurant", "menuitem", "review"):
        admin_perms += model_perms("menu", m, ("view", "add", "change", "delete"))
    admin_perms += model_perms("coupons", "giftcoupon", ("view", "change"))
    admin_perms += model_perms("loyalty", "loyaltyprofile", ("view", "change"))
    groups[ROLE_ADMIN].permissions.add(*admin_perms)

    return groups


class Command(BaseCommand):
    help = "Seed role groups (Admin, Customer) and optionally a demo admin account."

    def add_arguments(self, parser):
        parser.add_argument("--create-admin", action="store_true", help="Also create a demo admin user")
        parser.add_argument("--email", type=str, default="admin@example.com", help="Email/username for the demo admin")
        parser.add_argument("--password", type=str, default="ChangeMe123!", help="Password for the demo admin")

    def handle(self, *args, **options):
        groups = seed_permissions()
        self.stdout.write(self.style.SUCCESS("Groups and permissions seeded."))

        if options["create_admin"]:
            User = get_user_model()
            email = options["email"].strip().lower()
            user, created = User.objects.get_or_create(username=email, defaults={"email": email, "first_name": "Admin"})
            if created:
                user.set_password(options["password"])
                user.save()
            user.groups.add(groups[ROLE_ADMIN])
            self.stdout.write(self.style.SUCCESS(f"User '{email}' in group '{ROLE_ADMIN}'"))
            if created:
                self.stdout.write(self.style.WARNING(f"Demo admin created with password: {options['password']}"))
