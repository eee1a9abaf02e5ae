from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tableside.db.session import get_db
from tableside.schemas.category import CategoryRead
from tableside.schemas.menu_item import MenuItemRead
from tableside.services import catalog

router = APIRouter(prefix="/api", tags=["Menu"])


@router.get("/categories", response_model=List[CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    return catalog.list_categories(db)


@router.get("/menu-items", response_model=List[MenuItemRead])
def list_menu_items(category: Optional[str] = None, db: Session = Depends(get_db)):
    # ?category=<slug> narrows the listing to one category
    return catalog.list_menu_items(db, category_slug=category)


@router.get("/menu-items/{item_id}", response_model=MenuItemRead)
def get_menu_item(item_id: int, db: Session = Depends(get_db)):
    return catalog.get_menu_item(db, item_id)
