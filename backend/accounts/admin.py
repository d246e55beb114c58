from django.contrib import admin
from .models import Restaurant, Staff, UserProfile


@admin.register(Restaurant)
class RestaurantAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "email", "currency", "active", "created_at")
    search_fields = ("name", "email")
    list_filter = ("active", "currency")


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "restaurant", "role", "created_at")
    search_fields = ("user__username", "restaurant__name", "role")
    list_filter = ("role",)


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "role", "restaurant", "active")
    search_fields = ("name", "email")
    list_filter = ("restaurant", "role", "active")
