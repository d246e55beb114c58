from django.urls import path

from . import views

urlpatterns = [
    path("orders/", views.orders_collection, name="orders"),
    path("orders/<int:order_id>/", views.order_detail, name="order_detail"),
    path("orders/<int:order_id>/status/", views.order_status, name="order_status"),
    path("orders/<int:order_id>/kot/", views.order_kot, name="order_kot"),
    path("kots/", views.kots_collection, name="kots"),
    path("kots/<int:kot_id>/", views.kot_detail, name="kot_detail"),
    path("kots/<int:kot_id>/status/", views.kot_status, name="kot_status"),
]
