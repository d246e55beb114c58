from django.http import HttpResponse
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

ORDERS_CREATED = Counter(
    "restopos_orders_created_total",
    "Orders created",
    ["type"],
)
ORDER_REJECTIONS = Counter(
    "restopos_order_rejections_total",
    "Order creations rejected",
    ["reason"],
)
STATUS_TRANSITIONS = Counter(
    "restopos_status_transitions_total",
    "Order and KOT status transitions",
    ["entity", "status"],
)


def metrics_view(request):
    payload = generate_latest()
    return HttpResponse(payload, content_type=CONTENT_TYPE_LATEST)


def track_order_created(order_type):
    ORDERS_CREATED.labels(type=order_type or "unknown").inc()


def track_order_rejected(reason):
    ORDER_REJECTIONS.labels(reason=reason or "unknown").inc()


def track_transition(entity, status):
    STATUS_TRANSITIONS.labels(entity=entity, status=status or "unknown").inc()
