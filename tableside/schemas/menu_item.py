from decimal import Decimal
from datetime import datetime
from typing import Optional

from tableside.schemas.common import ApiModel
from tableside.schemas.category import CategoryRead


class MenuItemCreate(ApiModel):
    name: str
    description: Optional[str] = None
    price: Decimal
    category_id: Optional[int] = None
    image_url: Optional[str] = None
    model_url: Optional[str] = None
    is_active: bool = True
    display_order: int = 0


class MenuItemUpdate(ApiModel):
    # partial update: only fields present in the body are applied
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    category_id: Optional[int] = None
    image_url: Optional[str] = None
    model_url: Optional[str] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = None


class MenuItemRead(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    category_id: Optional[int] = None
    image_url: Optional[str] = None
    model_url: Optional[str] = None
    is_active: bool
    display_order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category: Optional[CategoryRead] = None
