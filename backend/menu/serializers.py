from rest_framework import serializers

from .models import MenuItem


class MenuItemSerializer(serializers.ModelSerializer):
    restaurantId = serializers.IntegerField(source="restaurant_id", read_only=True)

    class Meta:
        model = MenuItem
        fields = [
            "id",
            "name",
            "description",
            "category",
            "price",
            "stock",
            "available",
            "image",
            "restaurantId",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "restaurantId", "created_at", "updated_at"]

    def validate_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Price must be greater than 0.")
        return value

    def validate_category(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Category is required.")
        return value

    def update(self, instance, validated_data):
        # sent columns only, stock may have moved since the row was read
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save(update_fields=[*validated_data, "updated_at"])
        return instance
