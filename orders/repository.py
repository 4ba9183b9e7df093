"""Record store access for orders.

A thin layer over the SQLAlchemy session so the order service never builds
queries itself. Every method works on the session it was given; committing
is the repository's job, opening and closing the session is the caller's.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from .models import Order, OrderStatus


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def add(self, order: Order) -> Order:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def get(self, order_id: UUID) -> Order | None:
        return self.db.get(Order, order_id)

    def save(self, order: Order) -> Order:
        self.db.commit()
        self.db.refresh(order)
        return order

    def query(
        self,
        status: OrderStatus | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> list[Order]:
        """Non-deleted orders matching every filter given, oldest first.

        Price bounds are inclusive.
        """
        q = self.db.query(Order).filter(Order.status != OrderStatus.DELETED.value)
        if status is not None:
            q = q.filter(Order.status == status.value)
        if min_price is not None:
            q = q.filter(Order.total_price >= min_price)
        if max_price is not None:
            q = q.filter(Order.total_price <= max_price)
        return q.order_by(Order.created_at).all()
