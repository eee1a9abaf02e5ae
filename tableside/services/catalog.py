import logging
import re
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from tableside.core.errors import NotFoundError, ValidationError
from tableside.models.category import Category
from tableside.models.menu_item import MenuItem
from tableside.models.order_item import OrderItem

logger = logging.getLogger(__name__)


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (value or "").strip().lower()).strip("-")
    return slug or "category"


# --- categories ---

def list_categories(db: Session, include_inactive: bool = False) -> List[Category]:
    q = db.query(Category)
    if not include_inactive:
        q = q.filter(Category.is_active.is_(True))
    return q.order_by(Category.display_order, Category.name).all()


def get_category(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


def _ensure_slug_free(db: Session, slug: str, exclude_id: Optional[int] = None) -> None:
    q = db.query(Category).filter(Category.slug == slug, Category.is_active.is_(True))
    if exclude_id is not None:
        q = q.filter(Category.id != exclude_id)
    if q.first():
        raise ValidationError(f"Slug '{slug}' is already used by an active category")


def create_category(db: Session, data: dict) -> Category:
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("Category name is required")
    slug = slugify(data.get("slug") or name)
    is_active = data.get("is_active", True)
    if is_active:
        _ensure_slug_free(db, slug)
    category = Category(
        name=name,
        slug=slug,
        display_order=data.get("display_order") or 0,
        is_active=is_active,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("created category id=%s slug=%r", category.id, category.slug)
    return category


def update_category(db: Session, category_id: int, data: dict) -> Category:
    category = get_category(db, category_id)
    if "name" in data:
        name = (data["name"] or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        category.name = name
    if data.get("slug"):
        category.slug = slugify(data["slug"])
    if data.get("display_order") is not None:
        category.display_order = data["display_order"]
    if data.get("is_active") is not None:
        category.is_active = data["is_active"]
    if category.is_active:
        _ensure_slug_free(db, category.slug, exclude_id=category.id)
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("updated category id=%s slug=%r active=%s", category.id, category.slug, category.is_active)
    return category


def delete_category(db: Session, category_id: int) -> None:
    category = get_category(db, category_id)
    # items stay on the menu without a category
    db.query(MenuItem).filter(MenuItem.category_id == category.id).update(
        {MenuItem.category_id: None}, synchronize_session=False
    )
    db.delete(category)
    db.commit()
    logger.info("deleted category id=%s", category_id)


# --- menu items ---

def _menu_query(db: Session):
    return db.query(MenuItem).outerjoin(Category, MenuItem.category_id == Category.id)


def list_menu_items(db: Session, category_slug: Optional[str] = None, include_inactive: bool = False) -> List[MenuItem]:
    """Menu items with their category, in menu order.

    Customer listings only show active items; uncategorized items come last.
    """
    q = _menu_query(db)
    if not include_inactive:
        q = q.filter(MenuItem.is_active.is_(True))
    if category_slug:
        # an inactive category may share the slug of the live one
        q = q.filter(Category.slug == category_slug, Category.is_active.is_(True))
    return q.order_by(
        Category.id.is_(None),
        Category.display_order,
        MenuItem.display_order,
        MenuItem.name,
    ).all()


def get_menu_item(db: Session, item_id: int) -> MenuItem:
    item = db.query(MenuItem).filter(MenuItem.id == item_id).first()
    if not item:
        raise NotFoundError("Menu item not found")
    return item


def _check_menu_fields(db: Session, data: dict) -> None:
    if "name" in data and not (data["name"] or "").strip():
        raise ValidationError("Menu item name is required")
    if "price" in data:
        price = data["price"]
        if price is None:
            raise ValidationError("Price is required")
        if not Decimal(str(price)).is_finite() or Decimal(str(price)) < 0:
            raise ValidationError("Price must not be negative")
    if data.get("category_id") is not None:
        if not db.query(Category).filter(Category.id == data["category_id"]).first():
            raise ValidationError("Category does not exist")


def create_menu_item(db: Session, data: dict) -> MenuItem:
    if "name" not in data:
        raise ValidationError("Menu item name is required")
    _check_menu_fields(db, data)
    item = MenuItem(
        name=data["name"].strip(),
        description=data.get("description"),
        price=data.get("price") or 0,
        category_id=data.get("category_id"),
        image_url=data.get("image_url"),
        model_url=data.get("model_url"),
        is_active=data.get("is_active", True),
        display_order=data.get("display_order") or 0,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("created menu item id=%s price=%s category_id=%s", item.id, item.price, item.category_id)
    return item


def update_menu_item(db: Session, item_id: int, data: dict) -> MenuItem:
    item = get_menu_item(db, item_id)
    _check_menu_fields(db, data)
    for key, value in data.items():
        if key in ("name", "is_active", "display_order", "price") and value is None:
            continue
        setattr(item, key, value.strip() if key == "name" else value)
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("updated menu item id=%s fields=%s", item.id, sorted(data))
    return item


def delete_menu_item(db: Session, item_id: int) -> None:
    item = get_menu_item(db, item_id)
    # order history keeps its name/price snapshot; only the link is dropped
    detached = db.query(OrderItem).filter(OrderItem.menu_item_id == item.id).update(
        {OrderItem.menu_item_id: None}, synchronize_session=False
    )
    db.delete(item)
    db.commit()
    logger.info("deleted menu item id=%s detached_order_items=%s", item_id, detached)
