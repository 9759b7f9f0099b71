from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.test import Client

from orders.cart import CART_SESSION_KEY
from orders.models import Order, OrderTracking
from tests.factories import MenuItemFactory, OrderFactory, OrderTrackingFactory, RestaurantFactory, ReviewFactory


@pytest.mark.django_db
def test_pages_require_login():
    resp = Client().get("/restaurants/")
    assert resp.status_code == 302
    assert resp["Location"].startswith("/login/")


@pytest.mark.django_db
def test_restaurants_lists_active_only(auth_client):
    RestaurantFactory(name="Spice Route")
    RestaurantFactory(name="Closed Kitchen", is_active=False)

    resp = auth_client.get("/restaurants/")

    assert resp.status_code == 200
    assert b"Spice Route" in resp.content
    assert b"Closed Kitchen" not in resp.content


@pytest.mark.django_db
def test_menu_page_shows_items_and_rating(auth_client):
    restaurant = RestaurantFactory()
    MenuItemFactory(restaurant=restaurant, name="Paneer Tikka")
    ReviewFactory(restaurant=restaurant, rating=4)
    ReviewFactory(restaurant=restaurant, rating=5)

    resp = auth_client.get(f"/restaurants/{restaurant.pk}/menu/")

    assert resp.status_code == 200
    assert resp.context["avg_rating"] == Decimal("4.5")
    assert b"Paneer Tikka" in resp.content


@pytest.mark.django_db
def test_menu_page_without_reviews(auth_client):
    restaurant = RestaurantFactory()
    resp = auth_client.get(f"/restaurants/{restaurant.pk}/menu/")
    assert resp.context["avg_rating"] == "No ratings yet"


@pytest.mark.django_db
def test_unknown_restaurant_renders_error(auth_client):
    resp = auth_client.get("/restaurants/424242/menu/")
    assert resp.status_code == 404
    assert resp.context["message"] == "Restaurant not found"


@pytest.mark.django_db
def test_review_submission(auth_client, user):
    restaurant = RestaurantFactory()
    ok = auth_client.post(f"/restaurants/{restaurant.pk}/review/", {"rating": 5, "comment": "Great"})
    bad = auth_client.post(f"/restaurants/{restaurant.pk}/review/", {"rating": 9})

    assert ok.status_code == 302
    assert restaurant.reviews.get().user == user
    assert bad.status_code == 400
    assert bad.context["message"] == "Failed to submit review"


@pytest.mark.django_db
def test_cart_add_view_and_remove(auth_client):
    item = MenuItemFactory(name="Masala Dosa", price=Decimal("60.00"))

    resp = auth_client.post(f"/cart/add/{item.pk}/", {"quantity": "2"})
    assert resp.status_code == 302
    assert auth_client.session[CART_SESSION_KEY] == [
        {"item_id": item.pk, "quantity": 2, "restaurant_id": item.restaurant_id}
    ]

    page = auth_client.get("/cart/")
    assert page.context["total_amount"] == Decimal("120.00")
    assert b"Masala Dosa" in page.content

    auth_client.post(f"/cart/remove/{item.pk}/")
    assert auth_client.session[CART_SESSION_KEY] == []


@pytest.mark.django_db
def test_cart_add_ajax_returns_json(auth_client):
    item = MenuItemFactory()
    resp = auth_client.post(f"/cart/add/{item.pk}/", HTTP_X_REQUESTED_WITH="XMLHttpRequest")
    assert resp.json() == {"ok": True, "item_id": item.pk, "quantity": 1, "cart_count": 1}


@pytest.mark.django_db
def test_cart_add_unknown_item(auth_client):
    resp = auth_client.post("/cart/add/999999/")
    assert resp.status_code == 404
    assert resp.context["message"] == "Failed to add to cart"


@pytest.mark.django_db
def test_checkout_page_with_empty_cart(auth_client):
    resp = auth_client.get("/checkout/")
    assert resp.context["message"] == "Your cart is empty!"


@pytest.mark.django_db
def test_checkout_flow_to_success_page(auth_client, user):
    item = MenuItemFactory(price=Decimal("150.00"))
    auth_client.post(f"/cart/add/{item.pk}/")

    preview = auth_client.get("/checkout/")
    assert preview.status_code == 200
    assert preview.context["preview"].first_order_discount == Decimal("15.00")

    resp = auth_client.post("/checkout/", {"payment_method": "COD"})
    order = Order.objects.get(user=user)
    assert resp.status_code == 302
    assert resp["Location"] == f"/orders/{order.pk}/success/"

    success = auth_client.get(resp["Location"])
    assert success.status_code == 200
    assert success.context["receipt"].final_amount == Decimal("135.00")
    assert auth_client.session[CART_SESSION_KEY] == []


@pytest.mark.django_db
def test_checkout_below_minimum_shows_error(auth_client):
    item = MenuItemFactory(price=Decimal("99.99"))
    auth_client.post(f"/cart/add/{item.pk}/")

    resp = auth_client.post("/checkout/", {"payment_method": "COD"})

    assert resp.status_code == 400
    assert resp.context["message"] == "Minimum order amount should be ₹100 to place an order."
    assert not Order.objects.exists()


@pytest.mark.django_db
def test_checkout_with_qr_redirects_to_qr_view(auth_client):
    item = MenuItemFactory(price=Decimal("200.00"))
    auth_client.post(f"/cart/add/{item.pk}/")

    resp = auth_client.post("/checkout/", {"payment_method": "QR"})
    assert resp.status_code == 302
    assert resp["Location"] == "/checkout/?qr=1"
    assert not Order.objects.exists()

    page = auth_client.get(resp["Location"])
    assert page.context["show_qr"] is True


@pytest.mark.django_db
def test_my_orders_and_tracking(auth_client, user):
    mine = OrderTrackingFactory(order=OrderFactory(user=user)).order
    theirs = OrderFactory()

    listing = auth_client.get("/my-orders/")
    assert list(listing.context["orders"]) == [mine]

    assert auth_client.get(f"/track-order/{mine.pk}/").status_code == 200
    other = auth_client.get(f"/track-order/{theirs.pk}/")
    assert other.status_code == 404
    assert other.context["not_found"] is True


@pytest.mark.django_db
def test_admin_pages_are_role_protected(auth_client, admin_client_role):
    order = OrderTrackingFactory().order

    assert auth_client.get("/manage/orders/").status_code == 403
    assert auth_client.post(f"/manage/orders/{order.pk}/status/", {"status": "Delivered"}).status_code == 403

    assert admin_client_role.get("/manage/orders/?status=Placed").status_code == 200
    resp = admin_client_role.post(f"/manage/orders/{order.pk}/status/", {"status": OrderTracking.STATUS_PREPARING})
    assert resp.status_code == 302
    order.tracking.refresh_from_db()
    assert order.tracking.status == OrderTracking.STATUS_PREPARING


@pytest.mark.django_db
def test_admin_status_update_rejects_unknown_status(admin_client_role):
    order = OrderTrackingFactory().order
    resp = admin_client_role.post(f"/manage/orders/{order.pk}/status/", {"status": "Lost"})
    assert resp.status_code == 400
    order.tracking.refresh_from_db()
    assert order.tracking.status == OrderTracking.STATUS_PLACED


@pytest.mark.django_db
def test_signup_login_logout():
    client = Client()
    resp = client.post(
        "/signup/",
        {"name": "Asha Rao", "email": "Asha@Example.com", "password": "s3cure-pass!", "phone": "+919876543210"},
    )
    assert resp.status_code == 302
    created = get_user_model().objects.get(email="asha@example.com")
    assert created.display_name == "Asha Rao"

    bad = client.post("/login/", {"email": "asha@example.com", "password": "wrong"}, follow=True)
    assert b"Invalid email or password." in bad.content

    ok = client.post("/login/", {"email": "asha@example.com", "password": "s3cure-pass!"})
    assert ok.status_code == 302
    assert ok["Location"] == "/restaurants/"

    client.get("/logout/")
    assert client.get("/restaurants/").status_code == 302


@pytest.mark.django_db
def test_signup_rejects_duplicate_email(user):
    resp = Client().post("/signup/", {"name": "Dup", "email": user.email, "password": "s3cure-pass!"})
    assert resp.status_code == 400
    assert "email" in resp.context["errors"]


@pytest.mark.django_db
def test_profile_shows_points(auth_client, user):
    user.loyalty_profile.points = 420
    user.loyalty_profile.save()
    resp = auth_client.get("/profile/")
    assert resp.context["loyalty"].points == 420


@pytest.mark.django_db
def test_unknown_url_uses_error_page(auth_client):
    resp = auth_client.get("/definitely/not/here/")
    assert resp.status_code == 404
    assert b"Page not found" in resp.content


@pytest.mark.django_db
def test_response_carries_request_id(auth_client):
    resp = auth_client.get("/restaurants/", HTTP_X_REQUEST_ID="abc-123")
    assert resp["X-Request-ID"] == "abc-123"


@pytest.mark.django_db
def test_root_redirects_to_restaurants():
    resp = Client().get("/")
    assert resp.status_code == 302
    assert resp["Location"] == "/restaurants/"
