from django.db import transaction

from rest_framework import exceptions, permissions, viewsets

from accounts.mixins import TenantQuerySetMixin
from accounts.permissions import ManagerWritePermission, StaffPermission
from accounts.utils import get_restaurant_for_request
from orders.transitions import ACTIVE_ORDER_STATUSES

from .models import Reservation, Table
from .serializers import ReservationSerializer, TableSerializer


class TableViewSet(TenantQuerySetMixin, viewsets.ModelViewSet):
    serializer_class = TableSerializer
    permission_classes = [permissions.IsAuthenticated, ManagerWritePermission]
    queryset = Table.objects.select_related("current_order")

    def get_queryset(self):
        qs = super().get_queryset()
        status_filter = self.request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        return qs.order_by("number")

    def _check_number(self, restaurant, number, exclude_pk=None):
        qs = Table.objects.filter(restaurant=restaurant, number=number)
        if exclude_pk:
            qs = qs.exclude(pk=exclude_pk)
        if qs.exists():
            raise exceptions.ValidationError({"number": "Table number already exists in this restaurant."})

    def perform_create(self, serializer):
        restaurant = get_restaurant_for_request(self.request)
        self._check_number(restaurant, serializer.validated_data.get("number"))
        serializer.save(restaurant=restaurant)

    def perform_update(self, serializer):
        number = serializer.validated_data.get("number")
        if number is not None:
            self._check_number(serializer.instance.restaurant, number, exclude_pk=serializer.instance.pk)
        serializer.save()

    def perform_destroy(self, instance):
        if instance.orders.filter(status__in=ACTIVE_ORDER_STATUSES).exists():
            raise exceptions.ValidationError("Cannot delete table with active orders.")
        instance.delete()


class ReservationViewSet(TenantQuerySetMixin, viewsets.ModelViewSet):
    serializer_class = ReservationSerializer
    permission_classes = [permissions.IsAuthenticated, StaffPermission]
    queryset = Reservation.objects.select_related("table")

    def get_queryset(self):
        qs = super().get_queryset()
        date = self.request.query_params.get("date")
        if date:
            qs = qs.filter(date=date)
        status_filter = self.request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        return qs.order_by("date", "time")

    def get_serializer_context(self):
        ctx = super().get_serializer_context()
        ctx["restaurant"] = get_restaurant_for_request(self.request)
        return ctx

    def _hold_table(self, table):
        locked = Table.objects.select_for_update().get(id=table.id)
        if locked.current_order_id:
            raise exceptions.ValidationError({"tableId": "Table has an active order."})
        if locked.status != "reserved":
            locked.status = "reserved"
            locked.save(update_fields=["status", "updated_at"])

    def _free_table(self, table_id, reservation_id):
        locked = Table.objects.select_for_update().filter(id=table_id).first()
        if locked is None or locked.current_order_id or locked.status != "reserved":
            return
        still_held = (
            Reservation.objects.filter(table_id=table_id, status="confirmed")
            .exclude(id=reservation_id)
            .exists()
        )
        if not still_held:
            locked.status = "available"
            locked.save(update_fields=["status", "updated_at"])

    def perform_create(self, serializer):
        restaurant = get_restaurant_for_request(self.request)
        with transaction.atomic():
            reservation = serializer.save(restaurant=restaurant)
            if reservation.status == "confirmed":
                self._hold_table(reservation.table)

    def perform_update(self, serializer):
        previous_table_id = serializer.instance.table_id
        previous_status = serializer.instance.status
        with transaction.atomic():
            reservation = serializer.save()
            if previous_status == "confirmed":
                self._free_table(previous_table_id, reservation.id)
            if reservation.status == "confirmed":
                self._hold_table(reservation.table)

    def perform_destroy(self, instance):
        with transaction.atomic():
            if instance.status == "confirmed":
                self._free_table(instance.table_id, instance.id)
            instance.delete()
