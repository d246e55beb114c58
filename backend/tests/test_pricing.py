import pytest
from decimal import Decimal
from types import SimpleNamespace

from orders.exceptions import ValidationError
from orders.services import pricing


def test_totals_use_configured_rates(settings):
    settings.ORDERS_TAX_RATE = Decimal("0.10")
    settings.ORDERS_SERVICE_CHARGE_RATE = Decimal("0.05")

    totals = pricing.compute_totals([(Decimal("10.00"), 3)])

    assert totals == {
        "subtotal": Decimal("30.00"),
        "tax": Decimal("3.00"),
        "service_charge": Decimal("1.50"),
        "discount": Decimal("0.00"),
        "total": Decimal("34.50"),
    }


def test_amounts_round_half_up_to_the_cent(settings):
    settings.ORDERS_TAX_RATE = Decimal("0.10")
    settings.ORDERS_SERVICE_CHARGE_RATE = Decimal("0.05")

    totals = pricing.compute_totals([(Decimal("3.33"), 1), (Decimal("0.02"), 1)])

    assert totals["subtotal"] == Decimal("3.35")
    assert totals["tax"] == Decimal("0.34")
    assert totals["service_charge"] == Decimal("0.17")
    assert totals["total"] == Decimal("3.86")


def test_discount_bounds():
    with pytest.raises(ValidationError):
        pricing.compute_totals([(Decimal("5.00"), 1)], Decimal("-1"))
    with pytest.raises(ValidationError):
        pricing.compute_totals([(Decimal("5.00"), 1)], Decimal("100"))


def test_client_amounts_within_tolerance_pass():
    totals = pricing.compute_totals([(Decimal("10.00"), 1)])
    pricing.check_client_amounts(totals, {"subtotal": 10.0, "tax": 1.0, "service_charge": 0.5, "total": 11.509})


def test_client_amounts_outside_tolerance_fail():
    totals = pricing.compute_totals([(Decimal("10.00"), 1)])
    with pytest.raises(ValidationError) as exc:
        pricing.check_client_amounts(totals, {"tax": 1.5})
    assert exc.value.code == "amount_mismatch"
    assert exc.value.items[0]["field"] == "tax"


def test_line_price_mismatch():
    item = SimpleNamespace(id=1, name="Tea", price=Decimal("2.50"))
    pricing.check_line_price(item, None)
    pricing.check_line_price(item, 2.5)
    with pytest.raises(ValidationError) as exc:
        pricing.check_line_price(item, 3)
    assert exc.value.code == "price_mismatch"
