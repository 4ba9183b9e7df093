"""Who may do what with an order.

``authorize`` is a pure function of the action, the caller and (for actions
on a single order) the order itself:

    action         Admin    User
    create         allow    allow
    read           allow    only own orders
    update_status  allow    only own orders
    list           allow    forbid
    delete         allow    forbid

An order is the caller's own when its customer name equals the caller's
identity. Callers must load the order before asking about read or
update_status, so an unknown id is reported as not found, never forbidden.
"""

from enum import Enum

from auth.principal import Principal
from .errors import Forbidden
from .models import Order


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE_STATUS = "update_status"
    LIST = "list"
    DELETE = "delete"


class Decision(str, Enum):
    ALLOW = "allow"
    FORBID = "forbid"


ADMIN_ONLY = {Action.LIST, Action.DELETE}
OWNER_ONLY = {Action.READ, Action.UPDATE_STATUS}


def authorize(action: Action, principal: Principal, order: Order | None = None) -> Decision:
    if principal.is_admin:
        return Decision.ALLOW
    if action in ADMIN_ONLY:
        return Decision.FORBID
    if action in OWNER_ONLY:
        if order is None:
            raise ValueError(f"{action.value} needs the order to decide")
        return Decision.ALLOW if order.customer_name == principal.identity else Decision.FORBID
    return Decision.ALLOW


def ensure_allowed(action: Action, principal: Principal, order: Order | None = None) -> None:
    if authorize(action, principal, order) is Decision.FORBID:
        raise Forbidden(f"'{principal.identity}' is not allowed to {action.value.replace('_', ' ')}")
