import uuid

import pytest

from auth.principal import Principal, Role
from orders.errors import Forbidden
from orders.models import Order
from orders.policy import Action, Decision, authorize, ensure_allowed

ADMIN = Principal(identity="admin", role=Role.ADMIN)
OWNER = Principal(identity="Test User", role=Role.USER)
STRANGER = Principal(identity="someone else", role=Role.USER)


@pytest.fixture
def order():
    return Order(id=uuid.uuid4(), customer_name="Test User", status="pending")


@pytest.mark.parametrize("action", list(Action))
def test_admin_may_do_everything(action, order):
    assert authorize(action, ADMIN, order) is Decision.ALLOW


@pytest.mark.parametrize("action", [Action.LIST, Action.DELETE])
def test_user_never_lists_or_deletes(action, order):
    assert authorize(action, OWNER, order) is Decision.FORBID
    assert authorize(action, OWNER) is Decision.FORBID


def test_user_may_create():
    assert authorize(Action.CREATE, STRANGER) is Decision.ALLOW


@pytest.mark.parametrize("action", [Action.READ, Action.UPDATE_STATUS])
def test_user_reaches_only_own_orders(action, order):
    assert authorize(action, OWNER, order) is Decision.ALLOW
    assert authorize(action, STRANGER, order) is Decision.FORBID


def test_ownership_check_needs_the_order():
    with pytest.raises(ValueError):
        authorize(Action.READ, OWNER)


def test_ensure_allowed_raises_forbidden(order):
    ensure_allowed(Action.READ, OWNER, order)
    with pytest.raises(Forbidden) as e:
        ensure_allowed(Action.UPDATE_STATUS, STRANGER, order)
    assert e.value.status_code == 403
    assert "someone else" in e.value.message
