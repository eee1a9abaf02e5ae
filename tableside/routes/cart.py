from fastapi import APIRouter

from tableside.schemas.cart import CartQuote, CartQuoteRequest
from tableside.services import cart as cart_service

router = APIRouter(prefix="/api/cart", tags=["Cart"])


@router.post("/quote", response_model=CartQuote)
def quote(payload: CartQuoteRequest):
    """Price a cart the same way checkout shows it: subtotal, 8% tax, total."""
    c = cart_service.Cart()
    for line in payload.items:
        c = cart_service.add_item(c, line.menu_item_id, line.name or "", line.price, line.quantity)
    return CartQuote(
        subtotal=cart_service.subtotal(c),
        tax=cart_service.tax(c),
        total=cart_service.total(c),
        total_items=cart_service.total_items(c),
    )
