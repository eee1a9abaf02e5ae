import logging
from typing import List

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from tableside.db.session import get_db
from tableside.schemas.admin import AdminStatus, LoginRequest
from tableside.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from tableside.schemas.common import MessageResponse
from tableside.schemas.menu_item import MenuItemCreate, MenuItemRead, MenuItemUpdate
from tableside.services import auth as auth_service
from tableside.services import catalog
from tableside.services.auth import AdminContext, require_admin

router = APIRouter(prefix="/api/admin", tags=["Admin"])

logger = logging.getLogger(__name__)


# --- session ---

@router.post("/login", response_model=MessageResponse)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    auth_service.login(db, request, payload.password, payload.username)
    return MessageResponse(message="Login successful")


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request, db: Session = Depends(get_db)):
    auth_service.logout(db, request)
    return MessageResponse(message="Logged out")


@router.get("/status", response_model=AdminStatus)
def status(request: Request, db: Session = Depends(get_db)):
    ctx = auth_service.current_context(request, db)
    if ctx is None:
        return AdminStatus(is_authenticated=False)
    return AdminStatus(is_authenticated=True, principal=ctx.principal, role=ctx.role)


# --- menu items ---

@router.get("/menu-items", response_model=List[MenuItemRead])
def list_menu_items(db: Session = Depends(get_db), admin: AdminContext = Depends(require_admin)):
    return catalog.list_menu_items(db, include_inactive=True)


@router.post("/menu-items", response_model=MenuItemRead, status_code=201)
def create_menu_item(payload: MenuItemCreate, db: Session = Depends(get_db), admin: AdminContext = Depends(require_admin)):
    logger.info("create_menu_item by %s", admin.principal)
    return catalog.create_menu_item(db, payload.model_dump())


@router.put("/menu-items/{item_id}", response_model=MenuItemRead)
def update_menu_item(item_id: int, payload: MenuItemUpdate, db: Session = Depends(get_db), admin: AdminContext = Depends(require_admin)):
    return catalog.update_menu_item(db, item_id, payload.model_dump(exclude_unset=True))


@router.delete("/menu-items/{item_id}", status_code=204)
def delete_menu_item(item_id: int, db: Session = Depends(get_db), admin: AdminContext = Depends(require_admin)):
    logger.info("delete_menu_item id=%s by %s", item_id, admin.principal)
    catalog.delete_menu_item(db, item_id)
    return Response(status_code=204)


# --- categories ---

@router.get("/categories", response_model=List[CategoryRead])
def list_categories(db: Session = Depends(get_db), admin: AdminContext = Depends(require_admin)):
    return catalog.list_categories(db, include_inactive=True)


@router.post("/categories", response_model=CategoryRead, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db), admin: AdminContext = Depends(require_admin)):
    return catalog.create_category(db, payload.model_dump())


@router.put("/categories/{category_id}", response_model=CategoryRead)
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db), admin: AdminContext = Depends(require_admin)):
    return catalog.update_category(db, category_id, payload.model_dump(exclude_unset=True))


@router.delete("/categories/{category_id}", status_code=204)
def delete_category(category_id: int, db: Session = Depends(get_db), admin: AdminContext = Depends(require_admin)):
    logger.info("delete_category id=%s by %s", category_id, admin.principal)
    catalog.delete_category(db, category_id)
    return Response(status_code=204)
