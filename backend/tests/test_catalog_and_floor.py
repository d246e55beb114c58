import pytest
from decimal import Decimal
from django.db.models import F
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import Staff
from menu.models import MenuItem
from menu.serializers import MenuItemSerializer
from orders.services.orders import create_order
from tables.models import Reservation, Table
from .factories import MenuItemFactory, RestaurantFactory, TableFactory, UserFactory


def _auth_client(user):
    client = APIClient()
    token = RefreshToken.for_user(user).access_token
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.mark.django_db
def test_manager_creates_menu_item_and_staff_can_only_read():
    restaurant = RestaurantFactory()
    manager = UserFactory(profile=restaurant, profile__role="manager")
    waiter = UserFactory(profile=restaurant, profile__role="staff")

    res = _auth_client(manager).post(
        "/api/menu-items/",
        {"name": "Pho", "category": "Soups", "price": "9.50", "stock": 12},
        format="json",
    )
    assert res.status_code == 201
    assert res.data["restaurantId"] == restaurant.id
    assert MenuItem.objects.get(id=res.data["id"]).restaurant_id == restaurant.id

    staff_client = _auth_client(waiter)
    assert staff_client.get("/api/menu-items/").status_code == 200
    res = staff_client.post(
        "/api/menu-items/",
        {"name": "Bun", "category": "Soups", "price": "8.00"},
        format="json",
    )
    assert res.status_code == 403


@pytest.mark.django_db
def test_menu_item_price_must_be_positive():
    restaurant = RestaurantFactory()
    manager = UserFactory(profile=restaurant)

    res = _auth_client(manager).post(
        "/api/menu-items/",
        {"name": "Free", "category": "Misc", "price": "0.00"},
        format="json",
    )
    assert res.status_code == 400
    assert "price" in res.data


@pytest.mark.django_db
def test_menu_filters_and_categories():
    restaurant = RestaurantFactory()
    manager = UserFactory(profile=restaurant)
    MenuItemFactory(restaurant=restaurant, name="Tiramisu", category="Desserts")
    MenuItemFactory(restaurant=restaurant, name="Lasagna", category="Mains", available=False)
    MenuItemFactory(restaurant=restaurant, name="Gnocchi", category="Mains")
    MenuItemFactory(restaurant=RestaurantFactory(), name="Hidden", category="Secret")
    client = _auth_client(manager)

    names = [row["name"] for row in client.get("/api/menu-items/").data]
    assert names == ["Tiramisu", "Gnocchi", "Lasagna"]
    mains = client.get("/api/menu-items/?category=Mains&available=true").data
    assert [row["name"] for row in mains] == ["Gnocchi"]
    assert client.get("/api/menu-items/categories/").data == ["Desserts", "Mains"]


@pytest.mark.django_db
def test_menu_item_in_active_order_cannot_be_deleted():
    restaurant = RestaurantFactory()
    manager = UserFactory(profile=restaurant)
    menu_item = MenuItemFactory(restaurant=restaurant)
    create_order(
        restaurant,
        manager,
        {"type": "takeaway", "customer_info": {"name": "Kim"}, "items": [{"menu_item_id": menu_item.id, "quantity": 1}]},
    )

    res = _auth_client(manager).delete(f"/api/menu-items/{menu_item.id}/")

    assert res.status_code == 400
    assert MenuItem.objects.filter(id=menu_item.id).exists()


@pytest.mark.django_db
def test_menu_item_of_another_restaurant_is_invisible():
    manager = UserFactory(profile=RestaurantFactory())
    foreign = MenuItemFactory(restaurant=RestaurantFactory(), price=Decimal("4.00"))
    client = _auth_client(manager)

    assert client.get(f"/api/menu-items/{foreign.id}/").status_code == 404
    assert client.patch(f"/api/menu-items/{foreign.id}/", {"price": "1.00"}, format="json").status_code == 404


@pytest.mark.django_db
def test_table_numbers_are_unique_per_restaurant():
    restaurant = RestaurantFactory()
    manager = UserFactory(profile=restaurant)
    TableFactory(restaurant=restaurant, number=7)
    TableFactory(restaurant=RestaurantFactory(), number=8)
    client = _auth_client(manager)

    res = client.post("/api/tables/", {"number": 7, "capacity": 2}, format="json")
    assert res.status_code == 400
    res = client.post("/api/tables/", {"number": 8, "capacity": 2}, format="json")
    assert res.status_code == 201
    assert res.data["status"] == "available"


@pytest.mark.django_db
def test_table_occupancy_is_owned_by_orders():
    restaurant = RestaurantFactory()
    manager = UserFactory(profile=restaurant)
    menu_item = MenuItemFactory(restaurant=restaurant)
    free_table = TableFactory(restaurant=restaurant)
    busy_table = TableFactory(restaurant=restaurant)
    create_order(
        restaurant,
        manager,
        {"type": "dine-in", "table_id": busy_table.id, "items": [{"menu_item_id": menu_item.id, "quantity": 1}]},
    )
    client = _auth_client(manager)

    res = client.patch(f"/api/tables/{free_table.id}/", {"status": "occupied"}, format="json")
    assert res.status_code == 400
    res = client.patch(f"/api/tables/{busy_table.id}/", {"status": "available"}, format="json")
    assert res.status_code == 400
    res = client.delete(f"/api/tables/{busy_table.id}/")
    assert res.status_code == 400
    assert Table.objects.filter(id=busy_table.id).exists()

    res = client.get("/api/tables/?status=occupied")
    assert [row["id"] for row in res.data] == [busy_table.id]
    assert res.data[0]["currentOrderNumber"] == "ORD-00001"

    res = client.patch(f"/api/tables/{free_table.id}/", {"status": "reserved"}, format="json")
    assert res.status_code == 200


@pytest.mark.django_db
def test_reservation_party_must_fit_the_table():
    restaurant = RestaurantFactory()
    waiter = UserFactory(profile=restaurant, profile__role="staff")
    table = TableFactory(restaurant=restaurant, capacity=2)
    client = _auth_client(waiter)
    payload = {
        "customerName": "Lee",
        "customerPhone": "555-0102",
        "tableId": table.id,
        "date": "2026-05-01",
        "time": "19:30",
        "partySize": 4,
    }

    res = client.post("/api/reservations/", payload, format="json")
    assert res.status_code == 400
    assert "partySize" in res.data

    res = client.post("/api/reservations/", {**payload, "partySize": 2}, format="json")
    assert res.status_code == 201
    assert res.data["status"] == "pending"
    assert len(client.get("/api/reservations/?date=2026-05-01").data) == 1


@pytest.mark.django_db
def test_reservation_cannot_target_another_restaurant_table():
    restaurant = RestaurantFactory()
    waiter = UserFactory(profile=restaurant, profile__role="staff")
    foreign_table = TableFactory(restaurant=RestaurantFactory())

    res = _auth_client(waiter).post(
        "/api/reservations/",
        {
            "customerName": "Max",
            "customerPhone": "555-0103",
            "tableId": foreign_table.id,
            "date": "2026-05-01",
            "time": "12:00",
            "partySize": 2,
        },
        format="json",
    )
    assert res.status_code == 400
    assert "tableId" in res.data


@pytest.mark.django_db
def test_staff_email_is_unique_per_restaurant():
    restaurant = RestaurantFactory()
    manager = UserFactory(profile=restaurant)
    Staff.objects.create(restaurant=restaurant, name="Nia", email="nia@example.com")
    client = _auth_client(manager)

    res = client.post("/api/staff/", {"name": "Nia B", "email": "NIA@example.com", "role": "chef"}, format="json")
    assert res.status_code == 400

    res = client.post(
        "/api/staff/",
        {"name": "Oz", "email": "oz@example.com", "role": "cashier", "salary": "1800.00", "hireDate": "2026-01-15"},
        format="json",
    )
    assert res.status_code == 201
    assert res.data["restaurantId"] == restaurant.id
    assert [row["name"] for row in client.get("/api/staff/").data] == ["Nia", "Oz"]


@pytest.mark.django_db
def test_menu_partial_update_keeps_stock_sold_in_between():
    menu_item = MenuItemFactory(restaurant=RestaurantFactory(), name="Ramen", stock=10)
    MenuItem.objects.filter(id=menu_item.id).update(stock=F("stock") - 3)

    serializer = MenuItemSerializer(menu_item, data={"name": "Shoyu Ramen"}, partial=True)
    assert serializer.is_valid(), serializer.errors
    serializer.save()

    menu_item.refresh_from_db()
    assert menu_item.name == "Shoyu Ramen"
    assert menu_item.stock == 7


def _booking(table, **extra):
    return {
        "customerName": "Ana",
        "customerPhone": "555-0110",
        "tableId": table.id,
        "date": "2026-06-12",
        "time": "20:00",
        "partySize": 2,
        **extra,
    }


@pytest.mark.django_db
def test_confirmed_reservation_reserves_its_table():
    restaurant = RestaurantFactory()
    waiter = UserFactory(profile=restaurant, profile__role="staff")
    table = TableFactory(restaurant=restaurant, capacity=4)
    client = _auth_client(waiter)

    res = client.post("/api/reservations/", _booking(table), format="json")
    assert res.status_code == 201
    table.refresh_from_db()
    assert table.status == "available"

    res = client.post("/api/reservations/", _booking(table, status="confirmed"), format="json")
    assert res.status_code == 201
    table.refresh_from_db()
    assert table.status == "reserved"


@pytest.mark.django_db
def test_table_with_active_order_cannot_be_reserved():
    restaurant = RestaurantFactory()
    manager = UserFactory(profile=restaurant)
    menu_item = MenuItemFactory(restaurant=restaurant)
    table = TableFactory(restaurant=restaurant, capacity=4)
    order = create_order(
        restaurant,
        manager,
        {"type": "dine-in", "table_id": table.id, "items": [{"menu_item_id": menu_item.id, "quantity": 1}]},
    )

    res = _auth_client(manager).post("/api/reservations/", _booking(table, status="confirmed"), format="json")

    assert res.status_code == 400
    assert "tableId" in res.data
    assert not Reservation.objects.filter(restaurant=restaurant).exists()
    table.refresh_from_db()
    assert table.status == "occupied"
    assert table.current_order_id == order.id


@pytest.mark.django_db
def test_changing_a_confirmed_reservation_frees_the_old_table():
    restaurant = RestaurantFactory()
    waiter = UserFactory(profile=restaurant, profile__role="staff")
    first = TableFactory(restaurant=restaurant, capacity=4)
    second = TableFactory(restaurant=restaurant, capacity=4)
    client = _auth_client(waiter)
    booking = client.post("/api/reservations/", _booking(first, status="confirmed"), format="json").data

    res = client.patch(f"/api/reservations/{booking['id']}/", {"tableId": second.id}, format="json")
    assert res.status_code == 200
    first.refresh_from_db()
    second.refresh_from_db()
    assert first.status == "available"
    assert second.status == "reserved"

    res = client.patch(f"/api/reservations/{booking['id']}/", {"status": "cancelled"}, format="json")
    assert res.status_code == 200
    second.refresh_from_db()
    assert second.status == "available"


@pytest.mark.django_db
def test_deleting_a_confirmed_reservation_frees_its_table():
    restaurant = RestaurantFactory()
    waiter = UserFactory(profile=restaurant, profile__role="staff")
    table = TableFactory(restaurant=restaurant, capacity=4)
    client = _auth_client(waiter)
    kept = client.post("/api/reservations/", _booking(table, status="confirmed"), format="json").data
    dropped = client.post(
        "/api/reservations/", _booking(table, status="confirmed", time="21:30"), format="json"
    ).data

    assert client.delete(f"/api/reservations/{dropped['id']}/").status_code == 204
    table.refresh_from_db()
    assert table.status == "reserved"

    assert client.delete(f"/api/reservations/{kept['id']}/").status_code == 204
    table.refresh_from_db()
    assert table.status == "available"
