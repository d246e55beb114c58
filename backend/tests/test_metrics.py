import pytest
from django.db.utils import OperationalError
from rest_framework.test import APIClient

from orders.exceptions import OutOfStockError
from orders.services.orders import create_order
from utils.drf_exceptions import custom_exception_handler
from .factories import MenuItemFactory, RestaurantFactory, UserFactory


@pytest.mark.django_db
def test_metrics_endpoint_exposes_order_counters():
    restaurant = RestaurantFactory()
    user = UserFactory(profile=restaurant)
    menu_item = MenuItemFactory(restaurant=restaurant, stock=1)
    create_order(
        restaurant,
        user,
        {"type": "takeaway", "customer_info": {"name": "Pat"}, "items": [{"menu_item_id": menu_item.id, "quantity": 1}]},
    )
    with pytest.raises(OutOfStockError):
        create_order(
            restaurant,
            user,
            {"type": "takeaway", "customer_info": {"name": "Pat"}, "items": [{"menu_item_id": menu_item.id, "quantity": 1}]},
        )

    res = APIClient().get("/metrics/")

    assert res.status_code == 200
    assert "text/plain" in res.headers.get("Content-Type", "")
    content = res.content.decode("utf-8", errors="ignore")
    assert 'restopos_orders_created_total{type="takeaway"}' in content
    assert 'restopos_order_rejections_total{reason="out_of_stock"}' in content
    assert "restopos_status_transitions_total" in content


def test_health_endpoint():
    res = APIClient().get("/health/")

    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


@pytest.mark.django_db
def test_health_db_endpoint():
    res = APIClient().get("/health/db/")

    assert res.status_code == 200
    assert res.json()["db"] == "ok"


def test_exception_handler_maps_database_outage_to_503():
    res = custom_exception_handler(OperationalError("connection refused"), {})

    assert res.status_code == 503
    assert res.data["code"] == "db_unavailable"


def test_exception_handler_hides_unexpected_errors():
    res = custom_exception_handler(RuntimeError("secret internals"), {})

    assert res.status_code == 500
    assert res.data == {"detail": "Internal server error.", "code": "internal_error"}


def test_exception_handler_renders_order_errors():
    res = custom_exception_handler(OutOfStockError("Insufficient stock for: Tea.", items=[{"id": 1}]), {})

    assert res.status_code == 409
    assert res.data == {"detail": "Insufficient stock for: Tea.", "code": "out_of_stock", "items": [{"id": 1}]}
