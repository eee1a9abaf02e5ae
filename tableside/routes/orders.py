from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tableside.db.session import get_db
from tableside.schemas.order import (
    OrderCreate,
    OrderRead,
    OrderStatusUpdate,
    OrdersLastUpdated,
    PaymentStatusUpdate,
)
from tableside.services import orders as order_service
from tableside.services.auth import AdminContext, require_admin

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.post("", response_model=OrderRead, status_code=201)
@router.post("/", response_model=OrderRead, status_code=201)
def create_order(payload: OrderCreate, db: Session = Depends(get_db)):
    return order_service.create_order(
        db,
        table_number=payload.table_number,
        items=[it.model_dump() for it in payload.items],
        payment_method=payload.payment_method,
        special_instructions=payload.special_instructions,
        estimated_time=payload.estimated_time,
    )


@router.get("", response_model=List[OrderRead])
@router.get("/", response_model=List[OrderRead])
def list_orders(db: Session = Depends(get_db)):
    return order_service.list_orders(db)


# Static paths are registered before /{order_id}
@router.get("/last-updated", response_model=OrdersLastUpdated)
def orders_last_updated(db: Session = Depends(get_db)):
    """Cheap polling probe: clients refetch only when this value changes."""
    return OrdersLastUpdated(last_updated=order_service.orders_last_updated(db))


@router.get("/by-number/{order_number}", response_model=OrderRead)
def get_order_by_number(order_number: str, db: Session = Depends(get_db)):
    return order_service.get_order_by_number(db, order_number)


@router.get("/table/{table_number}", response_model=List[OrderRead])
def list_orders_by_table(table_number: int, db: Session = Depends(get_db)):
    return order_service.list_orders_by_table(db, table_number)


@router.get("/{order_id}", response_model=OrderRead)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return order_service.get_order(db, order_id)


@router.patch("/{order_id}/status", response_model=OrderRead)
def update_order_status(order_id: int, payload: OrderStatusUpdate, db: Session = Depends(get_db)):
    return order_service.update_order_status(db, order_id, payload.status)


@router.patch("/{order_id}/payment", response_model=OrderRead)
def update_payment_status(
    order_id: int,
    payload: PaymentStatusUpdate,
    db: Session = Depends(get_db),
    admin: AdminContext = Depends(require_admin),
):
    return order_service.update_payment_status(db, order_id, payload.payment_status)
