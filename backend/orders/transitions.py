"""
Order and KOT state machines as lookup tables.

No database access here: the synchronizer in ``orders.services.status``
asks these tables whether a change is legal and applies it.
"""
from .exceptions import InvalidTransitionError

# order types
DINE_IN = "dine-in"
TAKEAWAY = "takeaway"
DELIVERY = "delivery"

ORDER_TYPES = (DINE_IN, TAKEAWAY, DELIVERY)

# order / KOT statuses
PENDING = "pending"
PREPARING = "preparing"
READY = "ready"
SERVED = "served"
DELIVERED = "delivered"
COMPLETED = "completed"
CANCELLED = "cancelled"

ORDER_STATUSES = (PENDING, PREPARING, READY, SERVED, DELIVERED, COMPLETED, CANCELLED)
KOT_STATUSES = (PENDING, PREPARING, READY)

ACTIVE_ORDER_STATUSES = (PENDING, PREPARING, READY)
TERMINAL_ORDER_STATUSES = frozenset({COMPLETED, CANCELLED})
# entering one of these frees the dine-in table
TABLE_RELEASE_STATUSES = frozenset({SERVED, DELIVERED, COMPLETED, CANCELLED})

_SHARED_ORDER_EDGES = {
    PENDING: frozenset({PREPARING, CANCELLED}),
    PREPARING: frozenset({READY, CANCELLED}),
    SERVED: frozenset({COMPLETED, CANCELLED}),
    DELIVERED: frozenset({COMPLETED, CANCELLED}),
    COMPLETED: frozenset(),
    CANCELLED: frozenset(),
}

ORDER_TRANSITIONS = {
    DINE_IN: {**_SHARED_ORDER_EDGES, READY: frozenset({SERVED, CANCELLED})},
    TAKEAWAY: {**_SHARED_ORDER_EDGES, READY: frozenset({SERVED, CANCELLED})},
    DELIVERY: {**_SHARED_ORDER_EDGES, READY: frozenset({DELIVERED, CANCELLED})},
}

KOT_TRANSITIONS = {
    PENDING: frozenset({PREPARING, READY}),
    PREPARING: frozenset({READY}),
    READY: frozenset(),
}

# kitchen progress pushes the order forward, never back
KOT_TO_ORDER = {
    PREPARING: PREPARING,
    READY: READY,
}

_ORDER_PROGRESS = {PENDING: 0, PREPARING: 1, READY: 2}


def allowed_order_targets(order_type, status):
    try:
        return ORDER_TRANSITIONS[order_type][status]
    except KeyError:
        return frozenset()


def check_order_transition(order_type, current, target):
    """
    Return True when ``current -> target`` is a real change, False for a no-op.
    Raise InvalidTransitionError when the table forbids it.
    """
    if target == current:
        return False
    if current in TERMINAL_ORDER_STATUSES:
        raise InvalidTransitionError(f"Order is {current}; no further status changes are allowed.")
    if target not in allowed_order_targets(order_type, current):
        raise InvalidTransitionError(f"Cannot move a {order_type} order from {current} to {target}.")
    return True


def check_kot_transition(current, target):
    if target == current:
        return False
    if target not in KOT_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransitionError(f"Cannot move a KOT from {current} to {target}.")
    return True


def order_status_for_kot(kot_status, order_status):
    """Order status implied by a KOT change, or None when the order should stay put."""
    target = KOT_TO_ORDER.get(kot_status)
    if target is None or order_status not in _ORDER_PROGRESS:
        return None
    if _ORDER_PROGRESS[target] <= _ORDER_PROGRESS[order_status]:
        return None
    return target
