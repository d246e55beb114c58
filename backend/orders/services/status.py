"""
Status synchronizer.

Order and KOT moves are applied together with their side effects (table
release, optional restock, the kitchen pushing the order forward) inside a
single transaction, with the affected rows locked.
"""
import logging

from django.conf import settings
from django.db import transaction

from restopos.metrics import track_transition
from tables.models import Table

from .. import transitions
from ..exceptions import InvalidTransitionError, NotFoundError, ValidationError
from ..models import Kot, Order
from ..signals import kot_status_changed, order_status_changed
from . import stock

LOGGER = logging.getLogger(__name__)


def _release_table(order):
    if not order.table_id:
        return False
    table = Table.objects.select_for_update().filter(id=order.table_id, restaurant_id=order.restaurant_id).first()
    # the table may already host a newer order
    if table is None or table.current_order_id != order.id:
        return False
    table.status = "available"
    table.current_order = None
    table.save(update_fields=["status", "current_order", "updated_at"])
    return True


def update_order_status(restaurant, order_id, new_status):
    if new_status not in transitions.ORDER_STATUSES:
        raise ValidationError(f"Unknown order status: {new_status!r}.", code="invalid_status")

    with transaction.atomic():
        order = Order.objects.select_for_update().filter(restaurant=restaurant, id=order_id).first()
        if order is None:
            raise NotFoundError("Order not found.", code="order_not_found")

        previous = order.status
        if not transitions.check_order_transition(order.type, previous, new_status):
            return order

        order.status = new_status
        order.save(update_fields=["status", "updated_at"])

        if new_status in transitions.TABLE_RELEASE_STATUSES:
            _release_table(order)
        if new_status == transitions.CANCELLED and getattr(settings, "ORDERS_RESTOCK_ON_CANCEL", False):
            stock.restock(order)

        transaction.on_commit(
            lambda: order_status_changed.send(sender=Order, order=order, previous=previous)
        )

    track_transition("order", new_status)
    return order


def update_kot_status(restaurant, kot_id, new_status):
    if new_status not in transitions.KOT_STATUSES:
        raise ValidationError(f"Unknown KOT status: {new_status!r}.", code="invalid_status")

    with transaction.atomic():
        kot = Kot.objects.select_for_update().filter(restaurant=restaurant, id=kot_id).first()
        if kot is None:
            raise NotFoundError("KOT not found.", code="kot_not_found")
        if kot.status == new_status:
            return kot

        order = Order.objects.select_for_update().get(id=kot.order_id)
        if order.status not in transitions.ACTIVE_ORDER_STATUSES:
            raise InvalidTransitionError(
                f"Order {order.order_number} is {order.status}; its KOT can no longer change."
            )
        transitions.check_kot_transition(kot.status, new_status)

        previous_kot = kot.status
        kot.status = new_status
        kot.save(update_fields=["status", "updated_at"])

        previous_order = order.status
        pushed = transitions.order_status_for_kot(new_status, previous_order)
        if pushed:
            order.status = pushed
            order.save(update_fields=["status", "updated_at"])
            transaction.on_commit(
                lambda: order_status_changed.send(sender=Order, order=order, previous=previous_order)
            )

        transaction.on_commit(lambda: kot_status_changed.send(sender=Kot, kot=kot, previous=previous_kot))

    track_transition("kot", new_status)
    if pushed:
        track_transition("order", pushed)
    LOGGER.debug("KOT %s -> %s, order pushed=%s", kot.order_number, new_status, pushed)
    return kot
