from django.contrib import admin
from .models import Reservation, Table


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ["number", "restaurant", "capacity", "location", "status", "current_order"]
    list_filter = ["restaurant", "status"]


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ["customer_name", "restaurant", "table", "date", "time", "party_size", "status"]
    list_filter = ["restaurant", "status", "date"]
    search_fields = ["customer_name", "customer_phone"]
