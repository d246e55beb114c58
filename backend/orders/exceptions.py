"""
Errors raised by the order core.

Every error aborts the enclosing transaction. The DRF exception handler in
``utils.drf_exceptions`` turns them into ``{"detail", "code", "items"}``
responses using ``status_code``.
"""


class OrderError(Exception):
    status_code = 400
    default_code = "order_error"
    default_detail = "Order operation failed."

    def __init__(self, detail=None, code=None, items=None):
        self.detail = detail or self.default_detail
        self.code = code or self.default_code
        self.items = items or []
        super().__init__(self.detail)


class ValidationError(OrderError):
    status_code = 400
    default_code = "invalid_order"
    default_detail = "Invalid order."


class OutOfStockError(OrderError):
    status_code = 409
    default_code = "out_of_stock"
    default_detail = "Insufficient stock."


class ConflictError(OrderError):
    """Concurrent modification detected at commit time. Safe to retry once."""

    status_code = 409
    default_code = "conflict"
    default_detail = "Concurrent update detected, please retry."


class InvalidTransitionError(OrderError):
    status_code = 409
    default_code = "invalid_transition"
    default_detail = "Status change not allowed."


class NotFoundError(OrderError):
    status_code = 404
    default_code = "not_found"
    default_detail = "Not found."
