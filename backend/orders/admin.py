from django.contrib import admin

from .models import Kot, KotItem, Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ["menu_item", "menu_item_name", "quantity", "price"]


class KotItemInline(admin.TabularInline):
    model = KotItem
    extra = 0
    readonly_fields = ["menu_item", "menu_item_name", "quantity", "price"]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ["order_number", "restaurant", "type", "status", "total", "created_at"]
    list_filter = ["status", "type", "restaurant"]
    search_fields = ["order_number", "customer_name"]
    inlines = [OrderItemInline]


@admin.register(Kot)
class KotAdmin(admin.ModelAdmin):
    list_display = ["order_number", "restaurant", "type", "status", "created_at"]
    list_filter = ["status", "restaurant"]
    inlines = [KotItemInline]
