import re

from django.conf import settings
from django.db import transaction

from accounts.models import Restaurant

from ..exceptions import ConflictError
from ..models import Order

ORDER_NUMBER_PADDING = 5
ORDER_NUMBER_MAX_ATTEMPTS = 20


def order_number_prefix():
    return getattr(settings, "ORDER_NUMBER_PREFIX", "ORD-")


def format_order_number(seq):
    return f"{order_number_prefix()}{seq:0{ORDER_NUMBER_PADDING}d}"


def max_existing_order_sequence(restaurant):
    pattern = re.compile(rf"^{re.escape(order_number_prefix())}(\d+)$")
    max_seq = 0
    numbers = (
        Order.objects.filter(restaurant=restaurant, order_number__startswith=order_number_prefix())
        .values_list("order_number", flat=True)
        .iterator()
    )
    for number in numbers:
        match = pattern.match(str(number))
        if match:
            max_seq = max(max_seq, int(match.group(1)))
    return max_seq


def next_order_number(restaurant):
    """
    Allocate the next number of the restaurant's sequence.

    The restaurant row stays locked until the caller's transaction ends, so two
    orders of the same tenant never read the same counter.
    """
    with transaction.atomic():
        locked = Restaurant.objects.select_for_update().get(id=restaurant.id)
        seq = int(locked.order_sequence or 0)
        if seq < 1:
            seq = max_existing_order_sequence(locked)

        for _ in range(ORDER_NUMBER_MAX_ATTEMPTS):
            seq += 1
            candidate = format_order_number(seq)
            if Order.objects.filter(restaurant=locked, order_number=candidate).exists():
                continue
            locked.order_sequence = seq
            locked.save(update_fields=["order_sequence"])
            return candidate

        locked.order_sequence = seq
        locked.save(update_fields=["order_sequence"])

    raise ConflictError("Could not allocate a unique order number, please retry.", code="order_number_conflict")
