import pytest

from orders.cart import CART_SESSION_KEY, SessionCart


def test_add_new_item_appends_line(session):
    cart = SessionCart(session)
    line = cart.add(7, 2, restaurant_id=3)

    assert line.item_id == 7
    assert line.quantity == 2
    assert session[CART_SESSION_KEY] == [{"item_id": 7, "quantity": 2, "restaurant_id": 3}]


def test_add_existing_item_increments_quantity(session):
    cart = SessionCart(session)
    cart.add(7, 2, restaurant_id=3)
    line = cart.add("7", "3")

    assert line.quantity == 5
    assert len(cart) == 1
    assert cart.item_count == 5


@pytest.mark.parametrize("raw", [None, "", "abc", 0, -4, "1.5"])
def test_bad_quantity_is_coerced_to_one(session, raw):
    cart = SessionCart(session)
    assert cart.add(1, raw).quantity == 1


def test_add_rejects_invalid_item_id(session):
    cart = SessionCart(session)
    with pytest.raises(ValueError):
        cart.add("not-an-id")
    assert cart.is_empty


def test_add_then_remove_restores_cart(session):
    cart = SessionCart(session)
    cart.add(1, 2, restaurant_id=9)
    before = list(session[CART_SESSION_KEY])

    cart.add(2, 1, restaurant_id=9)
    assert cart.remove(2) is True

    assert session[CART_SESSION_KEY] == before


def test_remove_missing_item_is_a_noop(session):
    cart = SessionCart(session)
    cart.add(1)
    assert cart.remove(99) is False
    assert [ln.item_id for ln in cart] == [1]


def test_list_keeps_insertion_order_and_first_restaurant(session):
    cart = SessionCart(session)
    cart.add(5, restaurant_id=2)
    cart.add(3, restaurant_id=4)
    cart.add(9, restaurant_id=2)

    assert [ln.item_id for ln in cart.list()] == [5, 3, 9]
    assert cart.restaurant_id == 2


def test_malformed_session_rows_are_dropped(session):
    session[CART_SESSION_KEY] = [{"item_id": "x"}, "garbage", {"item_id": 4, "quantity": "2"}]
    cart = SessionCart(session)

    lines = cart.list()
    assert len(lines) == 1
    assert lines[0].item_id == 4
    assert lines[0].quantity == 2


def test_non_list_session_value_reads_as_empty(session):
    session[CART_SESSION_KEY] = {"oops": 1}
    cart = SessionCart(session)
    assert cart.is_empty
    assert cart.restaurant_id is None


def test_clear_empties_cart(session):
    cart = SessionCart(session)
    cart.add(1)
    cart.add(2)
    cart.clear()
    assert session[CART_SESSION_KEY] == []
    assert cart.item_count == 0
