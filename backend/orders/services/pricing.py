from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.conf import settings

from ..exceptions import ValidationError

CENT = Decimal("0.01")

AMOUNT_FIELDS = ("subtotal", "tax", "service_charge", "total")


def money(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid amount: {value!r}.", code="invalid_amount")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _tolerance():
    return Decimal(str(getattr(settings, "ORDERS_AMOUNT_TOLERANCE", "0.01")))


def compute_totals(priced_lines, discount=None):
    """
    priced_lines: iterable of (unit_price, quantity).
    Returns the authoritative breakdown, every amount rounded to the cent.
    """
    subtotal = money(sum((Decimal(price) * qty for price, qty in priced_lines), Decimal("0")))
    tax = money(subtotal * Decimal(str(settings.ORDERS_TAX_RATE)))
    service_charge = money(subtotal * Decimal(str(settings.ORDERS_SERVICE_CHARGE_RATE)))
    discount = money(discount)

    if discount < 0:
        raise ValidationError("Discount cannot be negative.", code="invalid_discount")
    gross = subtotal + tax + service_charge
    if discount > gross:
        raise ValidationError("Discount cannot exceed the order amount.", code="invalid_discount")

    return {
        "subtotal": subtotal,
        "tax": tax,
        "service_charge": service_charge,
        "discount": discount,
        "total": gross - discount,
    }


def check_line_price(menu_item, claimed):
    """Client-sent unit prices are only a consistency check against the catalog."""
    if claimed is None:
        return
    if abs(money(claimed) - menu_item.price) > _tolerance():
        raise ValidationError(
            f"Price of {menu_item.name} changed, please refresh the menu.",
            code="price_mismatch",
            items=[{"id": menu_item.id, "name": menu_item.name, "price": str(menu_item.price), "sent": str(claimed)}],
        )


def check_client_amounts(totals, claimed):
    mismatched = []
    for field in AMOUNT_FIELDS:
        value = claimed.get(field)
        if value is None:
            continue
        if abs(money(value) - totals[field]) > _tolerance():
            mismatched.append({"field": field, "expected": str(totals[field]), "sent": str(value)})
    if mismatched:
        raise ValidationError("Order amounts do not match the menu prices.", code="amount_mismatch", items=mismatched)
