from collections import defaultdict

from sqlalchemy import func
from sqlalchemy.orm import Session

from tableside.core.timezone_utils import local_midnight_utc, to_local
from tableside.models.order import Order
from tableside.models.order_item import OrderItem


def today_stats(db: Session, since=None) -> dict:
    """Totals for orders created since local midnight.

    Returns: { totalSales, totalOrders, avgOrder, tablesServed }
    """
    since = since or local_midnight_utc()
    total_sales, total_orders, avg_order, tables = (
        db.query(
            func.coalesce(func.sum(Order.total_amount), 0),
            func.count(Order.id),
            func.coalesce(func.avg(Order.total_amount), 0),
            func.count(func.distinct(Order.table_number)),
        )
        .filter(Order.created_at >= since)
        .one()
    )
    return {
        "totalSales": round(float(total_sales or 0), 2),
        "totalOrders": int(total_orders or 0),
        "avgOrder": round(float(avg_order or 0), 2),
        "tablesServed": int(tables or 0),
    }


def sales_by_hour(db: Session, since=None) -> list:
    """Today's orders bucketed by local hour, ascending; empty hours omitted."""
    since = since or local_midnight_utc()
    rows = (
        db.query(Order.created_at, Order.total_amount)
        .filter(Order.created_at >= since)
        .all()
    )
    # bucketing happens in Python so the local zone applies on every dialect
    buckets = defaultdict(lambda: {"sales": 0.0, "orders": 0})
    for created_at, total_amount in rows:
        hour = to_local(created_at).hour
        buckets[hour]["sales"] += float(total_amount or 0)
        buckets[hour]["orders"] += 1
    return [
        {"hour": hour, "sales": round(b["sales"], 2), "orders": b["orders"]}
        for hour, b in sorted(buckets.items())
    ]


def popular_items(db: Session, limit: int = 5, since=None) -> list:
    """Best sellers among today's orders by quantity, with their revenue."""
    since = since or local_midnight_utc()
    qty = func.sum(OrderItem.quantity).label("quantity")
    rows = (
        db.query(
            OrderItem.name,
            qty,
            func.coalesce(func.sum(OrderItem.total_price), 0).label("revenue"),
        )
        .join(Order, OrderItem.order_id == Order.id)
        .filter(Order.created_at >= since)
        .group_by(OrderItem.name)
        .order_by(qty.desc(), OrderItem.name)
        .limit(limit)
        .all()
    )
    return [
        {"name": name, "quantity": int(quantity or 0), "revenue": round(float(revenue or 0), 2)}
        for name, quantity, revenue in rows
    ]
