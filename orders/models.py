import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, Integer, Numeric, String, ForeignKey, DateTime, Uuid
from sqlalchemy.orm import relationship

from .db import Base


class OrderStatus(str, Enum):
    """Every status an order can be in. ``deleted`` marks a soft delete."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    DELETED = "deleted"


# Money keeps whatever scale the caller sent, up to 10 places
MoneyType = Numeric(30, 10)


def _utcnow():
    return datetime.now(timezone.utc)


class Order(Base):
    __tablename__ = "orders"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_name = Column(String, index=True, nullable=False)
    status = Column(String, index=True, nullable=False, default=OrderStatus.PENDING.value)
    total_price = Column(MoneyType, nullable=False, default=0)
    # Microsecond timestamps keep listings in insertion order
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    # 1 to N with Product; products go away with their order, kept in submitted order
    products = relationship(
        "Product",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="Product.position",
        lazy="selectin",
    )


class Product(Base):
    __tablename__ = "products"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("orders.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    price = Column(MoneyType, nullable=False)
    quantity = Column(Integer, nullable=False)
    order = relationship("Order", back_populates="products")
