from django.conf import settings
from django.db import models


class Restaurant(models.Model):
    name = models.CharField(max_length=150)
    address = models.CharField(max_length=255, blank=True, default="")
    phone = models.CharField(max_length=40, blank=True, default="")
    email = models.EmailField(unique=True)
    gst_number = models.CharField(max_length=40, blank=True, default="")
    logo = models.URLField(blank=True, default="")
    currency = models.CharField(max_length=3, default="USD")
    currency_symbol = models.CharField(max_length=8, default="$")
    active = models.BooleanField(default=True)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="owned_restaurants",
    )
    order_sequence = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name


class UserProfile(models.Model):
    ROLE_CHOICES = (
        ("super_admin", "Super admin"),
        ("admin", "Admin"),
        ("manager", "Manager"),
        ("staff", "Staff"),
    )

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    # null only for super_admin accounts
    restaurant = models.ForeignKey(
        Restaurant, on_delete=models.CASCADE, null=True, blank=True, related_name="users"
    )
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="staff")
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        scope = self.restaurant.name if self.restaurant_id else "ALL"
        return f"{self.user.username} ({self.role}) [{scope}]"


class Staff(models.Model):
    ROLE_CHOICES = (
        ("manager", "Manager"),
        ("waiter", "Waiter"),
        ("chef", "Chef"),
        ("cashier", "Cashier"),
    )

    restaurant = models.ForeignKey(Restaurant, on_delete=models.CASCADE, related_name="staff")
    name = models.CharField(max_length=150)
    email = models.EmailField()
    phone = models.CharField(max_length=40, blank=True, default="")
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="waiter")
    salary = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    active = models.BooleanField(default=True)
    hire_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["restaurant", "email"], name="uniq_staff_email_per_restaurant"),
        ]
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.role})"
