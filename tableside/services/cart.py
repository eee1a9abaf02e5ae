"""Cart value object and pricing rules.

A cart is an immutable tuple of lines; every operation returns a new Cart.
The same rounding and tax helpers back order totals in ``services.orders``.
"""
from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Tuple

TAX_RATE = Decimal("0.08")
CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    """Round to currency precision (2 decimals, half up)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def line_total(unit_price, quantity: int) -> Decimal:
    return to_money(Decimal(str(unit_price)) * quantity)


@dataclass(frozen=True)
class CartLine:
    menu_item_id: int
    name: str
    price: Decimal
    quantity: int = 1

    @property
    def total(self) -> Decimal:
        return line_total(self.price, self.quantity)


@dataclass(frozen=True)
class Cart:
    lines: Tuple[CartLine, ...] = ()

    @classmethod
    def from_lines(cls, lines: Iterable[CartLine]) -> "Cart":
        cart = cls()
        for line in lines:
            cart = add_item(cart, line.menu_item_id, line.name, line.price, line.quantity)
        return cart

    def find(self, menu_item_id: int) -> Optional[CartLine]:
        for line in self.lines:
            if line.menu_item_id == menu_item_id:
                return line
        return None


def add_item(cart: Cart, menu_item_id: int, name: str, price, quantity: int = 1) -> Cart:
    """Add quantity of a menu item, merging with an existing line."""
    if quantity <= 0:
        return cart
    if cart.find(menu_item_id) is not None:
        return Cart(tuple(
            replace(line, quantity=line.quantity + quantity) if line.menu_item_id == menu_item_id else line
            for line in cart.lines
        ))
    line = CartLine(menu_item_id=menu_item_id, name=name, price=Decimal(str(price)), quantity=quantity)
    return Cart(cart.lines + (line,))


def remove_item(cart: Cart, menu_item_id: int) -> Cart:
    return Cart(tuple(line for line in cart.lines if line.menu_item_id != menu_item_id))


def update_quantity(cart: Cart, menu_item_id: int, quantity: int) -> Cart:
    # zero or negative quantity drops the line
    if quantity <= 0:
        return remove_item(cart, menu_item_id)
    return Cart(tuple(
        replace(line, quantity=quantity) if line.menu_item_id == menu_item_id else line
        for line in cart.lines
    ))


def clear(cart: Cart) -> Cart:
    return Cart()


def subtotal(cart: Cart) -> Decimal:
    return to_money(sum((Decimal(str(line.price)) * line.quantity for line in cart.lines), Decimal("0")))


def tax(cart: Cart) -> Decimal:
    return to_money(subtotal(cart) * TAX_RATE)


def total(cart: Cart) -> Decimal:
    return to_money(subtotal(cart) * (1 + TAX_RATE))


def total_items(cart: Cart) -> int:
    return sum(line.quantity for line in cart.lines)
