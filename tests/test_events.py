import logging
import threading
import uuid

from orders.events import EventBus, OrderStatusChanged, log_status_change
from orders.models import OrderStatus


def _event():
    return OrderStatusChanged(order_id=uuid.uuid4(), old_status=OrderStatus.PENDING, new_status=OrderStatus.CONFIRMED)


def test_every_subscriber_receives_the_event():
    bus = EventBus(logging.getLogger("tests.events"))
    first, second = [], []
    bus.subscribe(first.append)
    bus.subscribe(second.append)

    event = _event()
    bus.publish(event)
    bus.shutdown(wait=True)

    assert first == [event]
    assert second == [event]


def test_publish_does_not_wait_for_subscribers():
    bus = EventBus(logging.getLogger("tests.events"))
    release = threading.Event()
    done = []

    def slow(event):
        release.wait(timeout=5)
        done.append(event)

    bus.subscribe(slow)
    futures = bus.publish(_event())

    # publish has returned while the subscriber is still blocked
    assert done == []
    release.set()
    for f in futures:
        f.result(timeout=5)
    assert len(done) == 1
    bus.shutdown()


def test_failing_subscriber_is_logged_and_isolated(caplog):
    bus = EventBus(logging.getLogger("tests.events"))
    delivered = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(broken)
    bus.subscribe(delivered.append)

    with caplog.at_level(logging.ERROR, logger="tests.events"):
        futures = bus.publish(_event())
        for f in futures:
            # delivery swallows the subscriber's error, so the future itself succeeds
            assert f.exception(timeout=5) is None
        bus.shutdown(wait=True)

    assert len(delivered) == 1
    assert any(r.getMessage() == "event subscriber failed" for r in caplog.records)


def test_no_subscribers_is_fine():
    bus = EventBus(logging.getLogger("tests.events"))
    assert bus.publish(_event()) == []
    bus.shutdown()


def test_log_status_change_records_transition(caplog):
    event = _event()
    handler = log_status_change(logging.getLogger("tests.audit"))

    with caplog.at_level(logging.INFO, logger="tests.audit"):
        handler(event)

    record = caplog.records[-1]
    assert record.getMessage() == "order status changed"
    assert record.order_id == str(event.order_id)
    assert record.old_status == "pending"
    assert record.new_status == "confirmed"
