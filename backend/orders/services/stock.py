import logging

from django.db.models import F
from django.utils import timezone

from menu.models import MenuItem

from ..exceptions import ConflictError, NotFoundError, OutOfStockError

LOGGER = logging.getLogger(__name__)


def requested_quantities(lines):
    """Sum quantities per menu item; the same item may appear on several lines."""
    requested = {}
    for line in lines:
        menu_item_id = line["menu_item_id"]
        requested[menu_item_id] = requested.get(menu_item_id, 0) + int(line["quantity"])
    return requested


def _shortage(menu_item, needed):
    return {
        "id": menu_item.id,
        "name": menu_item.name,
        "requested": needed,
        "stock": menu_item.stock,
        "available": menu_item.available,
    }


def check_availability(restaurant, lines):
    """
    Read-only pre-check. Returns {menu_item_id: MenuItem}.
    Raises NotFoundError for ids outside the restaurant catalog and
    OutOfStockError naming every short or unavailable item.
    """
    requested = requested_quantities(lines)
    menu_items = MenuItem.objects.filter(restaurant=restaurant, id__in=list(requested))
    menu_map = {item.id: item for item in menu_items}

    missing = [mid for mid in requested if mid not in menu_map]
    if missing:
        raise NotFoundError("Menu item not found.", code="menu_item_not_found", items=missing)

    short = [
        _shortage(menu_map[mid], needed)
        for mid, needed in requested.items()
        if not menu_map[mid].available or menu_map[mid].stock < needed
    ]
    if short:
        names = ", ".join(row["name"] for row in short)
        raise OutOfStockError(f"Insufficient stock for: {names}.", items=short)
    return menu_map


def consume_stock(restaurant, lines):
    """
    Decrement stock for every line. Must run inside transaction.atomic().

    Rows are locked in id order, then each decrement is a conditional UPDATE
    so a count that moved since the pre-check surfaces as ConflictError
    instead of going negative.
    """
    requested = requested_quantities(lines)
    locked = (
        MenuItem.objects.select_for_update()
        .filter(restaurant=restaurant, id__in=list(requested))
        .order_by("id")
    )
    menu_map = {item.id: item for item in locked}

    conflicts = []
    for mid in sorted(requested):
        item = menu_map.get(mid)
        if item is None:
            conflicts.append({"id": mid, "name": None, "requested": requested[mid], "stock": 0, "available": False})
        elif not item.available or item.stock < requested[mid]:
            conflicts.append(_shortage(item, requested[mid]))
    if conflicts:
        raise ConflictError("Stock changed while the order was being placed.", items=conflicts)

    now = timezone.now()
    for mid in sorted(requested):
        needed = requested[mid]
        updated = MenuItem.objects.filter(id=mid, stock__gte=needed).update(
            stock=F("stock") - needed, updated_at=now
        )
        if updated != 1:
            raise ConflictError(
                "Stock changed while the order was being placed.",
                items=[_shortage(menu_map[mid], needed)],
            )
        menu_map[mid].stock -= needed

    LOGGER.debug("Stock consumed restaurant=%s lines=%s", restaurant.id, requested)
    return menu_map


def restock(order):
    """Give back the quantities of a cancelled order. Items deleted since are skipped."""
    requested = {}
    for item in order.items.all():
        if item.menu_item_id is None:
            continue
        requested[item.menu_item_id] = requested.get(item.menu_item_id, 0) + item.quantity

    now = timezone.now()
    for mid in sorted(requested):
        MenuItem.objects.filter(id=mid, restaurant_id=order.restaurant_id).update(
            stock=F("stock") + requested[mid], updated_at=now
        )
    LOGGER.info("Restocked order=%s lines=%s", order.order_number, requested)
    return requested
