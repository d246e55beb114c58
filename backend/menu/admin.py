from django.contrib import admin
from .models import MenuItem


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ["name", "restaurant", "category", "price", "stock", "available"]
    list_filter = ["restaurant", "category", "available"]
    search_fields = ["name"]
