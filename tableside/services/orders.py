import logging
import secrets
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tableside.core.config import settings
from tableside.core.errors import InternalError, NotFoundError, ValidationError
from tableside.core.timezone_utils import utcnow
from tableside.models.menu_item import MenuItem
from tableside.models.order import Order, OrderStatus, PaymentMethod, PaymentStatus
from tableside.models.order_item import OrderItem
from tableside.services.cart import line_total, to_money

logger = logging.getLogger(__name__)

MIN_TABLE_NUMBER = 1
MAX_TABLE_NUMBER = 100

# received -> preparing -> ready -> served
STATUS_FLOW = [s.value for s in OrderStatus]
PAYMENT_STATUSES = {s.value for s in PaymentStatus}
PAYMENT_METHODS = {m.value for m in PaymentMethod}


def generate_order_number() -> str:
    """Return a shareable order number, e.g. ``ORD261019143005A1B2C3D4``.

    UTC timestamp to the second plus 32 random bits; the unique constraint on
    ``orders.order_number`` backs the uniqueness contract.
    """
    return "ORD" + utcnow().strftime("%y%m%d%H%M%S") + secrets.token_hex(4).upper()


def _field(item, name):
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def validate_order_request(table_number, items, payment_method, estimated_time=None):
    if not isinstance(table_number, int) or isinstance(table_number, bool):
        raise ValidationError("Invalid table number")
    if table_number < MIN_TABLE_NUMBER or table_number > MAX_TABLE_NUMBER:
        raise ValidationError(f"Table number must be between {MIN_TABLE_NUMBER} and {MAX_TABLE_NUMBER}")
    if not items:
        raise ValidationError("Order must contain at least one item")
    for it in items:
        qty = _field(it, "quantity")
        if not isinstance(qty, int) or qty < 1:
            raise ValidationError("Item quantity must be at least 1")
        try:
            price = Decimal(str(_field(it, "unit_price")))
        except (InvalidOperation, ValueError):
            raise ValidationError("Invalid unit price")
        if not price.is_finite() or price < 0:
            raise ValidationError("Unit price must not be negative")
    if payment_method not in PAYMENT_METHODS:
        raise ValidationError("Payment method must be one of: " + ", ".join(sorted(PAYMENT_METHODS)))
    if estimated_time is not None and estimated_time <= 0:
        raise ValidationError("Estimated time must be positive")


def compute_total(items) -> Decimal:
    """Sum of unit_price x quantity over the items.

    Unit prices are rounded to cents first so the total always equals the sum
    of the stored line totals.
    """
    return sum(
        (line_total(to_money(_field(it, "unit_price")), _field(it, "quantity")) for it in items),
        Decimal("0.00"),
    )


def build_order_item(item, menu_item: MenuItem) -> OrderItem:
    unit_price = to_money(_field(item, "unit_price"))
    qty = _field(item, "quantity")
    return OrderItem(
        menu_item_id=menu_item.id,
        name=menu_item.name,
        quantity=qty,
        unit_price=unit_price,
        total_price=line_total(unit_price, qty),
    )


def create_order(
    db: Session,
    table_number: int,
    items,
    payment_method: str,
    special_instructions: Optional[str] = None,
    estimated_time: Optional[int] = None,
) -> Order:
    """Create an order and its items in a single transaction.

    ``items`` is a sequence of ``{menu_item_id, quantity, unit_price}`` dicts
    or objects. Raises ValidationError for bad input and InternalError when
    the write fails; in that case nothing is persisted.
    """
    validate_order_request(table_number, items, payment_method, estimated_time)

    wanted_ids = {_field(it, "menu_item_id") for it in items}
    menu_items = {
        m.id: m for m in db.query(MenuItem).filter(MenuItem.id.in_(wanted_ids)).all()
    }
    missing = sorted(i for i in wanted_ids if i not in menu_items)
    if missing:
        raise ValidationError(f"Unknown menu item(s): {', '.join(str(i) for i in missing)}")

    order = Order(
        order_number=generate_order_number(),
        table_number=table_number,
        status=OrderStatus.received.value,
        total_amount=compute_total(items),
        payment_method=payment_method,
        payment_status=PaymentStatus.pending.value,
        special_instructions=special_instructions or None,
        estimated_time=estimated_time or settings.DEFAULT_ESTIMATED_TIME,
    )
    try:
        db.add(order)
        db.flush()
        for it in items:
            order.order_items.append(build_order_item(it, menu_items[_field(it, "menu_item_id")]))
            db.flush()
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("create_order failed table=%s", table_number)
        raise InternalError("Failed to create order") from exc
    db.refresh(order)
    logger.info(
        "created order id=%s number=%s table=%s total=%s items=%s",
        order.id, order.order_number, order.table_number, order.total_amount, len(order.order_items),
    )
    return order


def list_orders(db: Session) -> List[Order]:
    return db.query(Order).order_by(Order.created_at.desc(), Order.id.desc()).all()


def get_order(db: Session, order_id: int) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise NotFoundError("Order not found")
    return order


def get_order_by_number(db: Session, order_number: str) -> Order:
    order = db.query(Order).filter(Order.order_number == order_number).first()
    if not order:
        raise NotFoundError("Order not found")
    return order


def list_orders_by_table(db: Session, table_number: int) -> List[Order]:
    return (
        db.query(Order)
        .filter(Order.table_number == table_number)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def orders_last_updated(db: Session):
    """Newest change timestamp across orders, or None when there are none."""
    last = db.query(func.max(Order.updated_at)).scalar()
    if last is None:
        last = db.query(func.max(Order.created_at)).scalar()
    return last


def check_transition(current: str, target: str, policy: Optional[str] = None) -> None:
    if target not in STATUS_FLOW:
        raise ValidationError("Invalid status")
    policy = policy or settings.ORDER_STATUS_POLICY
    if policy == "free" or current == target:
        return
    if current not in STATUS_FLOW:
        # legacy/unknown stored value: allow moving onto the known flow
        return
    if STATUS_FLOW.index(target) != STATUS_FLOW.index(current) + 1:
        raise ValidationError(f"Cannot move order from '{current}' to '{target}'")


def update_order_status(db: Session, order_id: int, status: str) -> Order:
    if status not in STATUS_FLOW:
        raise ValidationError("Invalid status")
    order = get_order(db, order_id)
    check_transition(order.status, status)
    if order.status != status:
        previous = order.status
        order.status = status
        db.add(order)
        db.commit()
        db.refresh(order)
        logger.info("order id=%s status %s -> %s", order.id, previous, status)
    return order


def update_payment_status(db: Session, order_id: int, payment_status: str) -> Order:
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError("Payment status must be one of: " + ", ".join(sorted(PAYMENT_STATUSES)))
    order = get_order(db, order_id)
    if order.payment_status != payment_status:
        order.payment_status = payment_status
        db.add(order)
        db.commit()
        db.refresh(order)
        logger.info("order id=%s payment_status -> %s", order.id, payment_status)
    return order
