from decimal import Decimal

import factory
from django.contrib.auth import get_user_model

from accounts.models import Restaurant, UserProfile
from menu.models import MenuItem
from tables.models import Table

User = get_user_model()


class RestaurantFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Restaurant

    name = factory.Sequence(lambda n: f"Restaurant {n}")
    email = factory.Sequence(lambda n: f"restaurant{n}@example.com")


class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    password = factory.PostGenerationMethodCall("set_password", "password123")

    @factory.post_generation
    def profile(self, create, extracted, **kwargs):
        if not create:
            return
        role = kwargs.get("role", "manager")
        restaurant = extracted
        if restaurant is None and role != "super_admin":
            restaurant = RestaurantFactory()
        UserProfile.objects.create(user=self, restaurant=restaurant, role=role)


class MenuItemFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = MenuItem

    restaurant = factory.SubFactory(RestaurantFactory)
    name = factory.Sequence(lambda n: f"Dish {n}")
    category = "Mains"
    price = Decimal("10.00")
    stock = 10
    available = True


class TableFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Table

    restaurant = factory.SubFactory(RestaurantFactory)
    number = factory.Sequence(lambda n: n + 1)
    capacity = 4
    status = "available"
