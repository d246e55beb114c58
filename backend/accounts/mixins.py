from accounts.utils import get_restaurant_for_request


class TenantQuerySetMixin:
    """
    Force restaurant filtering on DRF querysets and stamp the restaurant on create.
    """

    def get_queryset(self):
        base_qs = super().get_queryset()
        restaurant = get_restaurant_for_request(self.request)
        return base_qs.filter(restaurant=restaurant)

    def perform_create(self, serializer):
        restaurant = get_restaurant_for_request(self.request)
        serializer.save(restaurant=restaurant)
