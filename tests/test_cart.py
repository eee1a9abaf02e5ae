from decimal import Decimal

import pytest

from tableside.services import cart
from tableside.services.cart import Cart, CartLine


def test_add_item_merges_lines_for_same_menu_item():
    c = cart.add_item(Cart(), 1, "Burger", Decimal("10.00"))
    c = cart.add_item(c, 1, "Burger", Decimal("10.00"), 2)
    c = cart.add_item(c, 2, "Lemonade", Decimal("5.00"))

    assert len(c.lines) == 2
    assert c.find(1).quantity == 3
    assert cart.total_items(c) == 4


def test_operations_do_not_mutate_the_original_cart():
    base = cart.add_item(Cart(), 1, "Burger", "10.00")
    cart.update_quantity(base, 1, 5)
    cart.remove_item(base, 1)
    cart.clear(base)

    assert base.find(1).quantity == 1


def test_update_quantity_to_zero_removes_line():
    c = cart.add_item(Cart(), 1, "Burger", "10.00", 2)
    c = cart.update_quantity(c, 1, 0)

    assert c.lines == ()


def test_remove_and_clear():
    c = cart.add_item(Cart(), 1, "Burger", "10.00")
    c = cart.add_item(c, 2, "Lemonade", "5.00")

    assert [line.menu_item_id for line in cart.remove_item(c, 1).lines] == [2]
    assert cart.clear(c).lines == ()


@pytest.mark.parametrize(
    "lines, subtotal, total",
    [
        ([("10.00", 2), ("5.00", 1)], "25.00", "27.00"),
        ([("3.99", 3)], "11.97", "12.93"),
        ([("0.10", 1)], "0.10", "0.11"),
        ([], "0.00", "0.00"),
    ],
)
def test_subtotal_and_total_with_tax(lines, subtotal, total):
    c = Cart.from_lines(CartLine(i, f"item {i}", Decimal(p), q) for i, (p, q) in enumerate(lines))

    assert cart.subtotal(c) == Decimal(subtotal)
    assert cart.total(c) == Decimal(total)
    assert cart.total(c) == cart.to_money(cart.subtotal(c) * Decimal("1.08"))


def test_tax_is_eight_percent_of_subtotal():
    c = cart.add_item(Cart(), 1, "Burger", "12.50", 2)

    assert cart.tax(c) == Decimal("2.00")


def test_quote_endpoint(client):
    resp = client.post("/api/cart/quote", json={"items": [
        {"menuItemId": 1, "name": "Burger", "price": 10.0, "quantity": 2},
        {"menuItemId": 2, "name": "Lemonade", "price": 5.0, "quantity": 1},
    ]})

    assert resp.status_code == 200
    data = resp.json()
    assert Decimal(data["subtotal"]) == Decimal("25.00")
    assert Decimal(data["tax"]) == Decimal("2.00")
    assert Decimal(data["total"]) == Decimal("27.00")
    assert data["totalItems"] == 3


def test_quote_rejects_negative_price_and_zero_quantity(client):
    negative = client.post("/api/cart/quote", json={"items": [
        {"menuItemId": 1, "price": -10, "quantity": 1},
    ]})
    zero = client.post("/api/cart/quote", json={"items": [
        {"menuItemId": 1, "price": 10, "quantity": 0},
    ]})

    assert negative.status_code == 400
    assert zero.status_code == 400
    assert negative.json()["message"] == "Invalid request data"
