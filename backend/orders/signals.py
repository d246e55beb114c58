import logging

from django.dispatch import Signal, receiver

LOGGER = logging.getLogger(__name__)

# Sent after commit only. Receivers get the saved instances as keyword args.
order_created = Signal()  # order, kot
order_status_changed = Signal()  # order, previous
kot_status_changed = Signal()  # kot, previous


@receiver(order_created)
def log_order_created(sender, order=None, kot=None, **kwargs):
    LOGGER.info(
        "Order created restaurant=%s number=%s type=%s total=%s kot=%s",
        order.restaurant_id,
        order.order_number,
        order.type,
        order.total,
        getattr(kot, "id", None),
    )


@receiver(order_status_changed)
def log_order_status_changed(sender, order=None, previous=None, **kwargs):
    LOGGER.info(
        "Order status restaurant=%s number=%s %s -> %s",
        order.restaurant_id,
        order.order_number,
        previous,
        order.status,
    )


@receiver(kot_status_changed)
def log_kot_status_changed(sender, kot=None, previous=None, **kwargs):
    LOGGER.info(
        "KOT status restaurant=%s number=%s %s -> %s",
        kot.restaurant_id,
        kot.order_number,
        previous,
        kot.status,
    )
