from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from tableside.schemas.common import ApiModel


class CartLineIn(ApiModel):
    menu_item_id: int
    name: Optional[str] = None
    price: Decimal = Field(ge=0)
    quantity: int = Field(default=1, ge=1)


class CartQuoteRequest(ApiModel):
    items: List[CartLineIn] = []


class CartQuote(ApiModel):
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    total_items: int
