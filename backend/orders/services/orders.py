# backend/orders/services/orders.py
import logging

from django.db import IntegrityError, transaction

from restopos.metrics import track_order_created, track_order_rejected
from tables.models import Table

from .. import transitions
from ..exceptions import ConflictError, NotFoundError, OrderError, ValidationError
from ..models import Kot, KotItem, Order, OrderItem
from ..signals import order_created
from . import numbering, pricing, stock

LOGGER = logging.getLogger(__name__)


def _clean_lines(items):
    if not items:
        raise ValidationError("Add at least one item to the order.", code="items_required")
    lines = []
    for raw in items:
        menu_item_id = raw.get("menu_item_id")
        quantity = raw.get("quantity")
        if menu_item_id is None:
            raise ValidationError("Each item needs a menu item id.", code="invalid_item")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError(
                "Quantity must be a positive whole number.",
                code="invalid_quantity",
                items=[{"menuItemId": menu_item_id, "quantity": quantity}],
            )
        lines.append(
            {
                "menu_item_id": menu_item_id,
                "quantity": quantity,
                "price": raw.get("price"),
                "special_instructions": (raw.get("special_instructions") or "").strip(),
            }
        )
    return lines


def _resolve_table(restaurant, order_type, table_id):
    if order_type != transitions.DINE_IN:
        if table_id:
            raise ValidationError("Only dine-in orders can use a table.", code="table_not_allowed")
        return None
    if not table_id:
        raise ValidationError("A table is required for dine-in orders.", code="table_required")
    table = Table.objects.filter(restaurant=restaurant, id=table_id).first()
    if table is None or table.status != "available":
        raise ValidationError("Table unavailable.", code="table_unavailable", items=[table_id])
    return table


def _customer(order_type, customer_info):
    info = customer_info or {}
    name = (info.get("name") or "").strip()
    phone = (info.get("phone") or "").strip()
    address = (info.get("address") or "").strip()
    if order_type != transitions.DINE_IN and not name:
        raise ValidationError("Customer name is required for takeaway and delivery.", code="customer_required")
    if order_type == transitions.DELIVERY and not address:
        raise ValidationError("A delivery address is required.", code="address_required")
    return name, phone, address


def create_order(restaurant, user, draft):
    """
    Place an order: validate, price from the catalog, then in one transaction
    allocate the number, decrement stock, occupy the table and open the KOT.

    ``draft`` keys: type, table_id, customer_info, items, discount and the
    optional client amounts (subtotal, tax, service_charge, total).
    """
    try:
        order = _create_order(restaurant, user, draft)
    except OrderError as exc:
        track_order_rejected(exc.code)
        LOGGER.warning("Order rejected restaurant=%s code=%s detail=%s", restaurant.id, exc.code, exc.detail)
        raise
    track_order_created(order.type)
    return order


def _create_order(restaurant, user, draft):
    order_type = draft.get("type")
    if order_type not in transitions.ORDER_TYPES:
        raise ValidationError(f"Unknown order type: {order_type!r}.", code="invalid_type")

    lines = _clean_lines(draft.get("items"))
    table = _resolve_table(restaurant, order_type, draft.get("table_id"))
    customer_name, customer_phone, customer_address = _customer(order_type, draft.get("customer_info"))

    menu_map = stock.check_availability(restaurant, lines)
    for line in lines:
        pricing.check_line_price(menu_map[line["menu_item_id"]], line["price"])

    totals = pricing.compute_totals(
        [(menu_map[line["menu_item_id"]].price, line["quantity"]) for line in lines],
        draft.get("discount"),
    )
    pricing.check_client_amounts(totals, draft)

    try:
        with transaction.atomic():
            order_number = numbering.next_order_number(restaurant)

            locked_table = None
            if table is not None:
                locked_table = Table.objects.select_for_update().get(id=table.id)
                if locked_table.status != "available":
                    raise ConflictError("Table was taken by another order.", code="table_conflict", items=[table.id])

            menu_map = stock.consume_stock(restaurant, lines)

            order = Order.objects.create(
                restaurant=restaurant,
                order_number=order_number,
                type=order_type,
                table=locked_table,
                customer_name=customer_name,
                customer_phone=customer_phone,
                customer_address=customer_address,
                staff=user if getattr(user, "is_authenticated", False) else None,
                **totals,
            )
            OrderItem.objects.bulk_create(
                [
                    OrderItem(
                        order=order,
                        menu_item=menu_map[line["menu_item_id"]],
                        menu_item_name=menu_map[line["menu_item_id"]].name,
                        quantity=line["quantity"],
                        price=menu_map[line["menu_item_id"]].price,
                        special_instructions=line["special_instructions"],
                    )
                    for line in lines
                ]
            )

            if locked_table is not None:
                locked_table.status = "occupied"
                locked_table.current_order = order
                locked_table.save(update_fields=["status", "current_order", "updated_at"])

            kot = Kot.objects.create(
                restaurant=restaurant,
                order=order,
                order_number=order.order_number,
                table_number=locked_table.number if locked_table else None,
                type=order_type,
            )
            KotItem.objects.bulk_create(
                [
                    KotItem(
                        kot=kot,
                        menu_item=menu_map[line["menu_item_id"]],
                        menu_item_name=menu_map[line["menu_item_id"]].name,
                        quantity=line["quantity"],
                        price=menu_map[line["menu_item_id"]].price,
                        special_instructions=line["special_instructions"],
                    )
                    for line in lines
                ]
            )

            transaction.on_commit(lambda: order_created.send(sender=Order, order=order, kot=kot))
    except IntegrityError as exc:
        # uniq_order_number_per_restaurant backstop
        code = "order_number_conflict" if "order_number" in str(exc) else None
        raise ConflictError("Order could not be saved, please retry.", code=code) from exc

    return order


def list_orders(restaurant, status=None, order_type=None, date=None):
    qs = (
        Order.objects.filter(restaurant=restaurant)
        .select_related("table", "kot")
        .prefetch_related("items")
    )
    if status:
        qs = qs.filter(status=status)
    if order_type:
        qs = qs.filter(type=order_type)
    if date:
        qs = qs.filter(created_at__date=date)
    return qs.order_by("-created_at", "-id")


def get_order(restaurant, order_id):
    order = (
        Order.objects.filter(restaurant=restaurant, id=order_id)
        .select_related("table", "kot")
        .prefetch_related("items")
        .first()
    )
    if order is None:
        raise NotFoundError("Order not found.", code="order_not_found")
    return order


def list_kots(restaurant, status=None, include_closed=False):
    """Kitchen queue. KOTs of orders that left the active workflow are hidden unless include_closed."""
    qs = Kot.objects.filter(restaurant=restaurant).select_related("order").prefetch_related("items")
    if not include_closed:
        qs = qs.filter(order__status__in=transitions.ACTIVE_ORDER_STATUSES)
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("created_at", "id")


def get_kot(restaurant, kot_id):
    kot = (
        Kot.objects.filter(restaurant=restaurant, id=kot_id)
        .select_related("order")
        .prefetch_related("items")
        .first()
    )
    if kot is None:
        raise NotFoundError("KOT not found.", code="kot_not_found")
    return kot


def get_kot_for_order(restaurant, order_id):
    kot = (
        Kot.objects.filter(restaurant=restaurant, order_id=order_id)
        .select_related("order")
        .prefetch_related("items")
        .first()
    )
    if kot is None:
        raise NotFoundError("KOT not found.", code="kot_not_found")
    return kot
