from rest_framework import exceptions

from accounts.models import Restaurant


def get_user_role(request):
    user = getattr(request, "user", None)
    if not user or not user.is_authenticated:
        return None
    profile = getattr(user, "profile", None)
    if profile is None:
        return "super_admin" if user.is_superuser else None
    return profile.role


def _requested_restaurant_id(request):
    value = None
    if hasattr(request, "query_params"):
        value = request.query_params.get("restaurant")
    if not value and hasattr(request, "data") and isinstance(request.data, dict):
        value = request.data.get("restaurantId") or request.data.get("restaurant")
    return value


def get_restaurant_for_request(request):
    """
    Resolve the tenant of the caller.
    - super_admin => ?restaurant=<id> (or restaurantId in the body), else their own profile restaurant
    - everyone else => pinned to their profile restaurant
    """
    user = getattr(request, "user", None)
    if not user or not user.is_authenticated:
        raise exceptions.NotAuthenticated()

    role = get_user_role(request)
    profile = getattr(user, "profile", None)

    if role == "super_admin":
        requested = _requested_restaurant_id(request)
        if requested:
            try:
                return Restaurant.objects.get(id=requested)
            except (Restaurant.DoesNotExist, ValueError, TypeError):
                raise exceptions.NotFound("Restaurant not found.")

    restaurant = profile.restaurant if profile else None
    if restaurant is None:
        raise exceptions.PermissionDenied("No restaurant selected for this account.")
    if not restaurant.active and role != "super_admin":
        raise exceptions.PermissionDenied("This restaurant is disabled.")
    return restaurant


def get_identity(request):
    """(user, role, restaurant) as trusted by the order core."""
    return request.user, get_user_role(request), get_restaurant_for_request(request)
