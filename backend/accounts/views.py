# backend/accounts/views.py
import logging

from django.contrib.auth import get_user_model
from rest_framework import exceptions, permissions, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .mixins import TenantQuerySetMixin
from .models import Restaurant, Staff
from .permissions import ManagerPermission, ManagerWritePermission, StaffPermission, SuperAdminPermission
from .serializers import (
    MeSerializer,
    RestaurantSerializer,
    SimpleTokenObtainPairSerializer,
    StaffSerializer,
    UserSerializer,
)
from .utils import get_restaurant_for_request, get_user_role

LOGGER = logging.getLogger(__name__)
User = get_user_model()


# --------------------------------
# Auth
# --------------------------------

class LoginView(TokenObtainPairView):
    serializer_class = SimpleTokenObtainPairSerializer
    permission_classes = [permissions.AllowAny]


class RefreshView(TokenRefreshView):
    permission_classes = [permissions.AllowAny]


class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(MeSerializer(request.user).data)


# --------------------------------
# Restaurants (tenant root)
# --------------------------------

class RestaurantViewSet(viewsets.ModelViewSet):
    serializer_class = RestaurantSerializer
    permission_classes = [permissions.IsAuthenticated, StaffPermission]

    def get_queryset(self):
        if get_user_role(self.request) == "super_admin":
            return Restaurant.objects.order_by("name")
        profile = getattr(self.request.user, "profile", None)
        return Restaurant.objects.filter(id=getattr(profile, "restaurant_id", None))

    def get_permissions(self):
        if self.action in ("create", "destroy"):
            return [permissions.IsAuthenticated(), SuperAdminPermission()]
        return super().get_permissions()

    def perform_create(self, serializer):
        restaurant = serializer.save(owner=self.request.user)
        LOGGER.info("Restaurant %s created by user %s", restaurant.id, self.request.user.id)

    def perform_update(self, serializer):
        if get_user_role(self.request) not in ("super_admin", "admin"):
            raise exceptions.PermissionDenied("Insufficient role to edit the restaurant.")
        serializer.save()

    def perform_destroy(self, instance):
        LOGGER.warning("Restaurant %s deleted by user %s", instance.id, self.request.user.id)
        instance.delete()


# --------------------------------
# Users (login accounts)
# --------------------------------

class UserViewSet(viewsets.ModelViewSet):
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated, ManagerPermission]

    def get_queryset(self):
        qs = User.objects.select_related("profile", "profile__restaurant").filter(profile__isnull=False)
        if get_user_role(self.request) == "super_admin" and not self.request.query_params.get("restaurant"):
            return qs.order_by("username")
        restaurant = get_restaurant_for_request(self.request)
        return qs.filter(profile__restaurant=restaurant).order_by("username")

    def get_serializer_context(self):
        ctx = super().get_serializer_context()
        role = get_user_role(self.request)
        ctx["caller_role"] = role
        ctx["caller_restaurant"] = None if role == "super_admin" else get_restaurant_for_request(self.request)
        return ctx

    def perform_destroy(self, instance):
        if instance.pk == self.request.user.pk:
            raise exceptions.ValidationError("Cannot delete your own account.")
        if instance.profile.role == "super_admin":
            raise exceptions.PermissionDenied("Cannot delete super admin users.")
        instance.delete()


# --------------------------------
# Staff (employees)
# --------------------------------

class StaffViewSet(TenantQuerySetMixin, viewsets.ModelViewSet):
    serializer_class = StaffSerializer
    permission_classes = [permissions.IsAuthenticated, ManagerWritePermission]
    queryset = Staff.objects.all()

    def _check_email(self, restaurant, email, exclude_pk=None):
        qs = Staff.objects.filter(restaurant=restaurant, email__iexact=email)
        if exclude_pk:
            qs = qs.exclude(pk=exclude_pk)
        if qs.exists():
            raise exceptions.ValidationError({"email": "Staff member with this email already exists."})

    def perform_create(self, serializer):
        restaurant = get_restaurant_for_request(self.request)
        self._check_email(restaurant, serializer.validated_data.get("email", ""))
        serializer.save(restaurant=restaurant)

    def perform_update(self, serializer):
        email = serializer.validated_data.get("email")
        if email:
            self._check_email(serializer.instance.restaurant, email, exclude_pk=serializer.instance.pk)
        serializer.save()
