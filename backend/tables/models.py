from django.db import models

from accounts.models import Restaurant


class Table(models.Model):
    STATUS_CHOICES = [
        ("available", "Available"),
        ("occupied", "Occupied"),
        ("reserved", "Reserved"),
    ]

    restaurant = models.ForeignKey(Restaurant, on_delete=models.CASCADE, related_name="tables")
    number = models.PositiveIntegerField()
    capacity = models.PositiveIntegerField()
    location = models.CharField(max_length=80, blank=True, default="")
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default="available")
    # weak back-reference, only the order core sets or clears it
    current_order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["restaurant", "number"], name="uniq_table_number_per_restaurant"),
        ]
        indexes = [
            models.Index(fields=["restaurant", "status"], name="table_rest_status_idx"),
        ]
        ordering = ["number"]

    def __str__(self):
        return f"Table {self.number}"


class Reservation(models.Model):
    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("confirmed", "Confirmed"),
        ("cancelled", "Cancelled"),
        ("completed", "Completed"),
    ]

    restaurant = models.ForeignKey(Restaurant, on_delete=models.CASCADE, related_name="reservations")
    table = models.ForeignKey(Table, on_delete=models.CASCADE, related_name="reservations")
    customer_name = models.CharField(max_length=150)
    customer_phone = models.CharField(max_length=40)
    email = models.EmailField(blank=True, default="")
    date = models.DateField()
    time = models.TimeField()
    party_size = models.PositiveIntegerField()
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default="pending")
    special_requests = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["restaurant", "date"], name="reservation_rest_date_idx"),
        ]
        ordering = ["date", "time"]

    def __str__(self):
        return f"{self.customer_name} @ {self.date} {self.time}"
