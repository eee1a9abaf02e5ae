from typing import Optional

from tableside.schemas.common import ApiModel


class CategoryCreate(ApiModel):
    name: str
    # derived from the name when omitted
    slug: Optional[str] = None
    display_order: int = 0
    is_active: bool = True


class CategoryUpdate(ApiModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    display_order: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryRead(ApiModel):
    id: int
    name: str
    slug: str
    display_order: int
    is_active: bool
