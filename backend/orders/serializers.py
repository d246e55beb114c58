from rest_framework import serializers

from . import transitions
from .models import Kot, KotItem, Order, OrderItem


class CustomerInfoSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    address = serializers.CharField(required=False, allow_blank=True, default="")


class OrderItemInputSerializer(serializers.Serializer):
    menuItemId = serializers.IntegerField(source="menu_item_id")
    quantity = serializers.IntegerField(min_value=1)
    # sent by the POS for display only, the catalog price wins
    price = serializers.FloatField(required=False, allow_null=True)
    specialInstructions = serializers.CharField(
        source="special_instructions", required=False, allow_blank=True, default=""
    )


class OrderCreateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=transitions.ORDER_TYPES)
    tableId = serializers.IntegerField(source="table_id", required=False, allow_null=True)
    customerInfo = CustomerInfoSerializer(source="customer_info", required=False, allow_null=True)
    items = OrderItemInputSerializer(many=True)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0, min_value=0)
    subtotal = serializers.FloatField(required=False, allow_null=True)
    tax = serializers.FloatField(required=False, allow_null=True)
    serviceCharge = serializers.FloatField(source="service_charge", required=False, allow_null=True)
    total = serializers.FloatField(required=False, allow_null=True)

    def validate(self, attrs):
        if not attrs.get("items"):
            raise serializers.ValidationError({"items": "Add at least one item to the order."})
        return attrs


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField()


class OrderItemSerializer(serializers.ModelSerializer):
    menuItemId = serializers.IntegerField(source="menu_item_id", read_only=True)
    menuItemName = serializers.CharField(source="menu_item_name", read_only=True)
    specialInstructions = serializers.CharField(source="special_instructions", read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "menuItemId", "menuItemName", "quantity", "price", "specialInstructions"]


class OrderSerializer(serializers.ModelSerializer):
    orderNumber = serializers.CharField(source="order_number", read_only=True)
    tableId = serializers.IntegerField(source="table_id", read_only=True)
    tableNumber = serializers.SerializerMethodField()
    customerInfo = serializers.SerializerMethodField()
    items = OrderItemSerializer(many=True, read_only=True)
    serviceCharge = serializers.DecimalField(source="service_charge", max_digits=12, decimal_places=2, read_only=True)
    staffId = serializers.IntegerField(source="staff_id", read_only=True)
    restaurantId = serializers.IntegerField(source="restaurant_id", read_only=True)
    kotId = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "orderNumber",
            "type",
            "tableId",
            "tableNumber",
            "customerInfo",
            "items",
            "subtotal",
            "tax",
            "serviceCharge",
            "discount",
            "total",
            "status",
            "staffId",
            "restaurantId",
            "kotId",
            "createdAt",
            "updatedAt",
        ]

    def get_tableNumber(self, obj):
        return obj.table.number if obj.table_id else None

    def get_customerInfo(self, obj):
        if not (obj.customer_name or obj.customer_phone or obj.customer_address):
            return None
        return {"name": obj.customer_name, "phone": obj.customer_phone, "address": obj.customer_address}

    def get_kotId(self, obj):
        kot = getattr(obj, "kot", None)
        return kot.id if kot else None


class KotItemSerializer(serializers.ModelSerializer):
    menuItemId = serializers.IntegerField(source="menu_item_id", read_only=True)
    menuItemName = serializers.CharField(source="menu_item_name", read_only=True)
    specialInstructions = serializers.CharField(source="special_instructions", read_only=True)

    class Meta:
        model = KotItem
        fields = ["id", "menuItemId", "menuItemName", "quantity", "price", "specialInstructions"]


class KotSerializer(serializers.ModelSerializer):
    orderId = serializers.IntegerField(source="order_id", read_only=True)
    orderNumber = serializers.CharField(source="order_number", read_only=True)
    tableNumber = serializers.IntegerField(source="table_number", read_only=True)
    orderStatus = serializers.CharField(source="order.status", read_only=True)
    items = KotItemSerializer(many=True, read_only=True)
    restaurantId = serializers.IntegerField(source="restaurant_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Kot
        fields = [
            "id",
            "orderId",
            "orderNumber",
            "tableNumber",
            "type",
            "status",
            "orderStatus",
            "items",
            "restaurantId",
            "createdAt",
            "updatedAt",
        ]
