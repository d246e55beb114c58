from rest_framework import serializers

from .models import Reservation, Table


class TableSerializer(serializers.ModelSerializer):
    restaurantId = serializers.IntegerField(source="restaurant_id", read_only=True)
    currentOrderId = serializers.IntegerField(source="current_order_id", read_only=True)
    currentOrderNumber = serializers.SerializerMethodField()

    class Meta:
        model = Table
        fields = [
            "id",
            "number",
            "capacity",
            "location",
            "status",
            "currentOrderId",
            "currentOrderNumber",
            "restaurantId",
        ]
        read_only_fields = ["id", "currentOrderId", "currentOrderNumber", "restaurantId"]

    def get_currentOrderNumber(self, obj):
        if not obj.current_order_id:
            return None
        return obj.current_order.order_number

    def validate_capacity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Capacity must be greater than 0.")
        return value

    def validate_status(self, value):
        instance = self.instance
        # occupancy is owned by the order workflow
        if value == "occupied" and (instance is None or instance.status != "occupied"):
            raise serializers.ValidationError("Tables become occupied through orders only.")
        if instance is not None and instance.current_order_id and value != instance.status:
            raise serializers.ValidationError("Table has an active order.")
        return value


class ReservationSerializer(serializers.ModelSerializer):
    tableId = serializers.PrimaryKeyRelatedField(source="table", queryset=Table.objects.all())
    customerName = serializers.CharField(source="customer_name")
    customerPhone = serializers.CharField(source="customer_phone")
    partySize = serializers.IntegerField(source="party_size", min_value=1)
    specialRequests = serializers.CharField(source="special_requests", required=False, allow_blank=True)
    restaurantId = serializers.IntegerField(source="restaurant_id", read_only=True)

    class Meta:
        model = Reservation
        fields = [
            "id",
            "customerName",
            "customerPhone",
            "email",
            "tableId",
            "date",
            "time",
            "partySize",
            "status",
            "specialRequests",
            "restaurantId",
            "created_at",
        ]
        read_only_fields = ["id", "restaurantId", "created_at"]

    def validate(self, attrs):
        restaurant = self.context.get("restaurant")
        table = attrs.get("table") or getattr(self.instance, "table", None)
        if table is None or (restaurant is not None and table.restaurant_id != restaurant.id):
            raise serializers.ValidationError({"tableId": "Invalid table selection."})
        party_size = attrs.get("party_size") or getattr(self.instance, "party_size", 0)
        if party_size > table.capacity:
            raise serializers.ValidationError({"partySize": "Party size exceeds table capacity."})
        return attrs
