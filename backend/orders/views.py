from datetime import date

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from accounts.permissions import StaffPermission
from accounts.utils import get_identity, get_restaurant_for_request

from .exceptions import ValidationError
from .serializers import KotSerializer, OrderCreateSerializer, OrderSerializer, StatusUpdateSerializer
from .services.orders import (
    create_order,
    get_kot,
    get_kot_for_order,
    get_order,
    list_kots,
    list_orders,
)
from .services.status import update_kot_status, update_order_status


def _parse_date(value):
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError("date must be YYYY-MM-DD.", code="invalid_date")


@api_view(["GET", "POST"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def orders_collection(request):
    if request.method == "POST":
        user, _role, restaurant = get_identity(request)
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = create_order(restaurant, user, serializer.validated_data)
        order = get_order(restaurant, order.id)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    restaurant = get_restaurant_for_request(request)
    qs = list_orders(
        restaurant,
        status=request.query_params.get("status") or None,
        order_type=request.query_params.get("type") or None,
        date=_parse_date(request.query_params.get("date")),
    )
    return Response(OrderSerializer(qs, many=True).data)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def order_detail(request, order_id: int):
    restaurant = get_restaurant_for_request(request)
    return Response(OrderSerializer(get_order(restaurant, order_id)).data)


@api_view(["PUT", "PATCH"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def order_status(request, order_id: int):
    restaurant = get_restaurant_for_request(request)
    serializer = StatusUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    update_order_status(restaurant, order_id, serializer.validated_data["status"])
    return Response(OrderSerializer(get_order(restaurant, order_id)).data)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def order_kot(request, order_id: int):
    restaurant = get_restaurant_for_request(request)
    return Response(KotSerializer(get_kot_for_order(restaurant, order_id)).data)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def kots_collection(request):
    restaurant = get_restaurant_for_request(request)
    qs = list_kots(
        restaurant,
        status=request.query_params.get("status") or None,
        include_closed=request.query_params.get("all") == "true",
    )
    return Response(KotSerializer(qs, many=True).data)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def kot_detail(request, kot_id: int):
    restaurant = get_restaurant_for_request(request)
    return Response(KotSerializer(get_kot(restaurant, kot_id)).data)


@api_view(["PUT", "PATCH"])
@permission_classes([permissions.IsAuthenticated, StaffPermission])
def kot_status(request, kot_id: int):
    restaurant = get_restaurant_for_request(request)
    serializer = StatusUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    update_kot_status(restaurant, kot_id, serializer.validated_data["status"])
    return Response(KotSerializer(get_kot(restaurant, kot_id)).data)
