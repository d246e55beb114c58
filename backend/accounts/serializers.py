from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import serializers, exceptions
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .models import Restaurant, Staff, UserProfile

User = get_user_model()

ELEVATED_ROLES = {"admin", "super_admin"}


def _restaurant_payload(restaurant):
    if restaurant is None:
        return None
    return {
        "id": restaurant.id,
        "name": restaurant.name,
        "currency": restaurant.currency,
        "currencySymbol": restaurant.currency_symbol,
    }


class SimpleTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        profile = getattr(user, "profile", None)
        if profile:
            token["restaurant_id"] = profile.restaurant_id
            token["role"] = profile.role
        return token

    def validate(self, attrs):
        username = attrs.get(self.username_field)
        if username and "@" in username:
            match = User.objects.filter(email__iexact=username.strip()).first()
            if match:
                attrs[self.username_field] = match.username

        data = super().validate(attrs)

        profile = getattr(self.user, "profile", None)
        if profile is None:
            raise exceptions.AuthenticationFailed("Account is not attached to a restaurant.", code="no_profile")
        if profile.restaurant_id and not profile.restaurant.active and profile.role != "super_admin":
            raise exceptions.AuthenticationFailed("This restaurant is disabled.", code="restaurant_disabled")

        data.update(
            {
                "user": {
                    "id": self.user.id,
                    "username": self.user.username,
                    "email": self.user.email,
                    "role": profile.role,
                },
                "restaurant": _restaurant_payload(profile.restaurant),
            }
        )
        return data


class MeSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField()
    email = serializers.EmailField(allow_blank=True, required=False)
    role = serializers.SerializerMethodField()
    restaurant = serializers.SerializerMethodField()

    def get_role(self, obj):
        profile = getattr(obj, "profile", None)
        return profile.role if profile else None

    def get_restaurant(self, obj):
        profile = getattr(obj, "profile", None)
        return _restaurant_payload(profile.restaurant if profile else None)


class RestaurantSerializer(serializers.ModelSerializer):
    currencySymbol = serializers.CharField(source="currency_symbol", required=False)
    gstNumber = serializers.CharField(source="gst_number", required=False, allow_blank=True)
    ownerId = serializers.IntegerField(source="owner_id", read_only=True)

    class Meta:
        model = Restaurant
        fields = [
            "id",
            "name",
            "address",
            "phone",
            "email",
            "gstNumber",
            "logo",
            "currency",
            "currencySymbol",
            "active",
            "ownerId",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "ownerId", "created_at", "updated_at"]

    def validate_currency(self, value):
        value = (value or "").strip().upper()
        if len(value) != 3:
            raise serializers.ValidationError("Use a 3-letter ISO currency code.")
        return value


class UserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source="first_name", required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=UserProfile.ROLE_CHOICES, source="profile.role")
    restaurantId = serializers.PrimaryKeyRelatedField(
        source="profile.restaurant",
        queryset=Restaurant.objects.all(),
        required=False,
        allow_null=True,
    )
    active = serializers.BooleanField(source="is_active", required=False)
    password = serializers.CharField(write_only=True, min_length=8, required=False)

    class Meta:
        model = User
        fields = ["id", "username", "email", "name", "role", "restaurantId", "active", "password", "date_joined"]
        read_only_fields = ["id", "date_joined"]

    def validate(self, attrs):
        profile_data = attrs.get("profile") or {}
        role = profile_data.get("role")
        caller_role = self.context.get("caller_role")
        caller_restaurant = self.context.get("caller_restaurant")

        if role in ELEVATED_ROLES and caller_role != "super_admin":
            raise exceptions.PermissionDenied("Cannot assign admin or super admin roles.")

        if caller_role != "super_admin":
            # pinned to the caller's restaurant
            profile_data["restaurant"] = caller_restaurant
        elif role and role != "super_admin" and not profile_data.get("restaurant"):
            if self.instance is None or not getattr(self.instance.profile, "restaurant_id", None):
                raise serializers.ValidationError({"restaurantId": "Restaurant is required for non super admin users."})

        if self.instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": "This field is required."})
        if attrs.get("email") and User.objects.filter(email__iexact=attrs["email"]).exclude(
            pk=getattr(self.instance, "pk", None)
        ).exists():
            raise serializers.ValidationError({"email": "User with this email already exists."})

        attrs["profile"] = profile_data
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        profile_data = validated_data.pop("profile", {})
        password = validated_data.pop("password")
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        UserProfile.objects.create(
            user=user,
            role=profile_data.get("role") or "staff",
            restaurant=profile_data.get("restaurant"),
        )
        return user

    @transaction.atomic
    def update(self, instance, validated_data):
        profile_data = validated_data.pop("profile", {})
        password = validated_data.pop("password", None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()

        profile = instance.profile
        if profile_data.get("role"):
            profile.role = profile_data["role"]
        if profile_data.get("restaurant") is not None:
            profile.restaurant = profile_data["restaurant"]
        profile.save(update_fields=["role", "restaurant"])
        return instance


class StaffSerializer(serializers.ModelSerializer):
    hireDate = serializers.DateField(source="hire_date", required=False, allow_null=True)
    restaurantId = serializers.IntegerField(source="restaurant_id", read_only=True)

    class Meta:
        model = Staff
        fields = ["id", "name", "email", "phone", "role", "salary", "active", "hireDate", "restaurantId", "created_at"]
        read_only_fields = ["id", "restaurantId", "created_at"]

    def validate_salary(self, value):
        if value < 0:
            raise serializers.ValidationError("Salary cannot be negative.")
        return value
