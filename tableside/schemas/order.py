from decimal import Decimal
from datetime import datetime
from typing import List, Optional

from tableside.schemas.common import ApiModel


class OrderItemCreate(ApiModel):
    menu_item_id: int
    quantity: int
    unit_price: Decimal


class OrderCreate(ApiModel):
    table_number: int
    items: List[OrderItemCreate] = []
    payment_method: str
    special_instructions: Optional[str] = None
    # minutes; the engine falls back to the configured default
    estimated_time: Optional[int] = None


class OrderItemRead(ApiModel):
    id: int
    order_id: int
    menu_item_id: Optional[int] = None
    name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class OrderRead(ApiModel):
    id: int
    order_number: str
    table_number: int
    status: str
    total_amount: Decimal
    payment_method: str
    payment_status: str
    special_instructions: Optional[str] = None
    estimated_time: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    order_items: List[OrderItemRead] = []


class OrderStatusUpdate(ApiModel):
    status: str


class PaymentStatusUpdate(ApiModel):
    payment_status: str


class OrdersLastUpdated(ApiModel):
    last_updated: Optional[datetime] = None
