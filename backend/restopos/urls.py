from django.contrib import admin
from django.db import connection
from django.db.utils import OperationalError, ProgrammingError
from django.http import JsonResponse
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from accounts.views import RestaurantViewSet, StaffViewSet, UserViewSet
from menu.views import MenuItemViewSet
from restopos.metrics import metrics_view
from tables.views import ReservationViewSet, TableViewSet

router = DefaultRouter()
router.register(r"restaurants", RestaurantViewSet, basename="restaurants")
router.register(r"users", UserViewSet, basename="users")
router.register(r"staff", StaffViewSet, basename="staff")
router.register(r"menu-items", MenuItemViewSet, basename="menu-items")
router.register(r"tables", TableViewSet, basename="tables")
router.register(r"reservations", ReservationViewSet, basename="reservations")


def health(request):
    return JsonResponse({"status": "ok"})


def health_db(request):
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        return JsonResponse({"status": "ok", "db": "ok"})
    except (OperationalError, ProgrammingError):
        return JsonResponse({"status": "degraded", "db": "unavailable"}, status=503)


urlpatterns = [
    path("health/", health, name="health"),
    path("health/db/", health_db, name="health-db"),
    path("metrics/", metrics_view, name="metrics"),
    path("admin/", admin.site.urls),

    path("api/auth/", include("accounts.urls")),
    path("api/", include("orders.urls")),
    path("api/", include(router.urls)),
]
