"""Order lifecycle: creation, status changes, soft delete and filtered listing.

``OrderService`` owns the rules; storage goes through ``OrderRepository``
and status-change facts go out through the ``EventBus``. Failures are
raised as ``NotFound`` or ``InvalidArgument``; nothing is defaulted
silently. Access control is not applied here, see ``orders.policy``.
"""

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List
from uuid import UUID

from .errors import InvalidArgument, NotFound
from .events import EventBus, OrderStatusChanged
from .models import Order, OrderStatus, Product
from .repository import OrderRepository


@dataclass(frozen=True)
class NewProduct:
    """A line item as submitted, before it gets an identifier."""

    name: str
    price: Decimal
    quantity: int


def parse_status(value) -> OrderStatus:
    """Return ``value`` as an ``OrderStatus`` or raise ``InvalidArgument``."""
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidArgument(f"Invalid order status: {value}")


class OrderService:
    def __init__(self, repository: OrderRepository, events: EventBus, logger: logging.Logger):
        self.repository = repository
        self.events = events
        self.logger = logger

    def create_order(self, customer_name: str, products: Iterable[NewProduct]) -> Order:
        products = list(products)
        self.logger.info("creating order", extra={"customer_name": customer_name})

        order = Order(
            id=uuid.uuid4(),
            customer_name=customer_name,
            status=OrderStatus.PENDING.value,
            products=[
                Product(id=uuid.uuid4(), position=i, name=p.name, price=p.price, quantity=p.quantity)
                for i, p in enumerate(products)
            ],
            total_price=sum((Decimal(p.price) * p.quantity for p in products), Decimal("0")),
        )
        self.repository.add(order)

        self.logger.info("order created", extra={"order_id": str(order.id), "total_price": str(order.total_price)})
        return order

    def get_order(self, order_id: UUID) -> Order:
        order = self.repository.get(order_id)
        if order is None:
            self.logger.warning("order not found", extra={"order_id": str(order_id)})
            raise NotFound(f"Order with ID {order_id} not found")
        return order

    def update_status(self, order_id: UUID, new_status) -> Order:
        # Validate before touching the store so a bad value leaves the order as it was
        try:
            status = parse_status(new_status)
        except InvalidArgument:
            self.logger.error("invalid order status", extra={"status": str(new_status)})
            raise
        order = self.get_order(order_id)
        self._change_status(order, status)
        self.logger.info("order updated", extra={"order_id": str(order_id), "status": status.value})
        return order

    def list_orders(self, status=None, min_price: Decimal | None = None, max_price: Decimal | None = None) -> List[Order]:
        # An empty status is the same as no status filter
        status_filter = parse_status(status) if status else None
        orders = self.repository.query(status=status_filter, min_price=min_price, max_price=max_price)
        self.logger.info("orders retrieved", extra={"order_count": len(orders)})
        return orders

    def delete_order(self, order_id: UUID) -> None:
        order = self.get_order(order_id)
        self._change_status(order, OrderStatus.DELETED)
        self.logger.info("order marked as deleted", extra={"order_id": str(order_id)})

    def _change_status(self, order: Order, status: OrderStatus) -> None:
        old_status = OrderStatus(order.status)
        order.status = status.value
        self.repository.save(order)
        # Only real transitions are facts worth publishing
        if old_status is not status:
            self.events.publish(OrderStatusChanged(order_id=order.id, old_status=old_status, new_status=status))
