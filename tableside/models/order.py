import enum

from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime
from sqlalchemy.orm import relationship
from tableside.core.timezone_utils import utcnow
from tableside.db.session import Base


class OrderStatus(str, enum.Enum):
    received = "received"
    preparing = "preparing"
    ready = "ready"
    served = "served"


class PaymentMethod(str, enum.Enum):
    cash = "cash"
    card = "card"


class PaymentStatus(str, enum.Enum):
    pending = "pending"
    paid = "paid"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(40), nullable=False, unique=True, index=True)
    table_number = Column(Integer, nullable=False, index=True)
    # stored as plain strings; the allowed values live in the enums above
    status = Column(String(20), nullable=False, default=OrderStatus.received.value)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    payment_method = Column(String(10), nullable=False)
    payment_status = Column(String(10), nullable=False, default=PaymentStatus.pending.value)
    special_instructions = Column(Text, nullable=True)
    estimated_time = Column(Integer, nullable=False, default=20)  # minutes
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    order_items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.id",
    )
