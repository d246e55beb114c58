from django.db import models

from accounts.models import Restaurant


class MenuItem(models.Model):
    restaurant = models.ForeignKey(Restaurant, on_delete=models.CASCADE, related_name="menu_items")

    name = models.CharField(max_length=140)
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=80)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    stock = models.PositiveIntegerField(default=0)
    available = models.BooleanField(default=True)
    image = models.URLField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["restaurant", "available"], name="menu_item_rest_avail_idx"),
            models.Index(fields=["restaurant", "category"], name="menu_item_rest_cat_idx"),
        ]

    def __str__(self):
        return self.name
