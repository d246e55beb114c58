from decimal import Decimal

from django.conf import settings
from django.db import models

from accounts.models import Restaurant
from menu.models import MenuItem

from . import transitions

TYPE_CHOICES = [
    (transitions.DINE_IN, "Dine-in"),
    (transitions.TAKEAWAY, "Takeaway"),
    (transitions.DELIVERY, "Delivery"),
]

ORDER_STATUS_CHOICES = [
    (transitions.PENDING, "Pending"),
    (transitions.PREPARING, "Preparing"),
    (transitions.READY, "Ready"),
    (transitions.SERVED, "Served"),
    (transitions.DELIVERED, "Delivered"),
    (transitions.COMPLETED, "Completed"),
    (transitions.CANCELLED, "Cancelled"),
]

KOT_STATUS_CHOICES = [
    (transitions.PENDING, "Pending"),
    (transitions.PREPARING, "Preparing"),
    (transitions.READY, "Ready"),
]


class Order(models.Model):
    restaurant = models.ForeignKey(Restaurant, on_delete=models.CASCADE, related_name="orders")
    order_number = models.CharField(max_length=32)
    type = models.CharField(max_length=12, choices=TYPE_CHOICES)
    table = models.ForeignKey(
        "tables.Table",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    customer_name = models.CharField(max_length=150, blank=True, default="")
    customer_phone = models.CharField(max_length=40, blank=True, default="")
    customer_address = models.TextField(blank=True, default="")
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    service_charge = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    status = models.CharField(max_length=12, choices=ORDER_STATUS_CHOICES, default=transitions.PENDING)
    staff = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["restaurant", "order_number"], name="uniq_order_number_per_restaurant"),
        ]
        indexes = [
            models.Index(fields=["restaurant", "status"], name="order_rest_status_idx"),
            models.Index(fields=["restaurant", "created_at"], name="order_rest_created_idx"),
        ]
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.order_number


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    menu_item = models.ForeignKey(
        MenuItem,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    menu_item_name = models.CharField(max_length=140)
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=12, decimal_places=2)
    special_instructions = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        ordering = ["id"]


class Kot(models.Model):
    restaurant = models.ForeignKey(Restaurant, on_delete=models.CASCADE, related_name="kots")
    order = models.OneToOneField(Order, on_delete=models.CASCADE, related_name="kot")
    order_number = models.CharField(max_length=32)
    table_number = models.PositiveIntegerField(null=True, blank=True)
    type = models.CharField(max_length=12, choices=TYPE_CHOICES)
    status = models.CharField(max_length=12, choices=KOT_STATUS_CHOICES, default=transitions.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["restaurant", "status"], name="kot_rest_status_idx"),
        ]
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"KOT {self.order_number}"


class KotItem(models.Model):
    kot = models.ForeignKey(Kot, on_delete=models.CASCADE, related_name="items")
    menu_item = models.ForeignKey(
        MenuItem,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="kot_items",
    )
    menu_item_name = models.CharField(max_length=140)
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=12, decimal_places=2)
    special_instructions = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        ordering = ["id"]
