"""Status-change facts and their delivery to subscribers.

The order service publishes an ``OrderStatusChanged`` after a status change
has been committed. Each subscriber receives it on a worker thread, so
publishing never waits for subscribers, delivery order between subscribers
is not guaranteed, and a subscriber that raises is logged and otherwise
ignored.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List
from uuid import UUID

from .models import OrderStatus


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: UUID
    old_status: OrderStatus
    new_status: OrderStatus
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


Subscriber = Callable[[OrderStatusChanged], None]


class EventBus:
    def __init__(self, logger: logging.Logger, max_workers: int = 2):
        self.logger = logger
        self._subscribers: List[Subscriber] = []
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="order-events")

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)

    def publish(self, event: OrderStatusChanged) -> List[Future]:
        """Hand ``event`` to every subscriber and return without waiting."""
        return [self._executor.submit(self._deliver, s, event) for s in list(self._subscribers)]

    def _deliver(self, subscriber: Subscriber, event: OrderStatusChanged) -> None:
        try:
            subscriber(event)
        except Exception:
            self.logger.exception(
                "event subscriber failed",
                extra={"order_id": str(event.order_id), "subscriber": getattr(subscriber, "__name__", repr(subscriber))},
            )

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


def log_status_change(logger: logging.Logger) -> Subscriber:
    """Subscriber that records every status transition in ``logger``."""

    def handle(event: OrderStatusChanged) -> None:
        logger.info(
            "order status changed",
            extra={
                "order_id": str(event.order_id),
                "old_status": event.old_status.value,
                "new_status": event.new_status.value,
            },
        )

    return handle
