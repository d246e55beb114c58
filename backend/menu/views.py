from rest_framework import exceptions, permissions, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.mixins import TenantQuerySetMixin
from accounts.permissions import ManagerWritePermission
from accounts.utils import get_restaurant_for_request
from orders.transitions import ACTIVE_ORDER_STATUSES

from .models import MenuItem
from .serializers import MenuItemSerializer


class MenuItemViewSet(TenantQuerySetMixin, viewsets.ModelViewSet):
    serializer_class = MenuItemSerializer
    permission_classes = [permissions.IsAuthenticated, ManagerWritePermission]
    queryset = MenuItem.objects.all()

    def get_queryset(self):
        qs = super().get_queryset()
        category = self.request.query_params.get("category")
        if category:
            qs = qs.filter(category=category)
        available = self.request.query_params.get("available")
        if available is not None:
            qs = qs.filter(available=available.lower() == "true")
        return qs.order_by("category", "name")

    @action(detail=False, methods=["get"])
    def categories(self, request):
        restaurant = get_restaurant_for_request(request)
        values = (
            MenuItem.objects.filter(restaurant=restaurant)
            .order_by("category")
            .values_list("category", flat=True)
            .distinct()
        )
        return Response(list(values))

    def perform_destroy(self, instance):
        if instance.order_items.filter(order__status__in=ACTIVE_ORDER_STATUSES).exists():
            raise exceptions.ValidationError("Cannot delete a menu item that is in active orders.")
        instance.delete()
