from django.contrib.auth import get_user_model
from rest_framework import serializers

from marketplace.catalog.api.serializers.user_serializers import SellerSummarySerializer


User = get_user_model()


class ShopListQuerySerializer(serializers.Serializer):
    lat = serializers.FloatField(required=False, min_value=-90, max_value=90)
    lng = serializers.FloatField(required=False, min_value=-180, max_value=180)
    radius_km = serializers.FloatField(required=False, min_value=0)
    role = serializers.ChoiceField(choices=list(User.SELLER_ROLES), required=False)


class NearbyShopSerializer(serializers.Serializer):
    """Serializes a NearbyShop"""

    seller = SellerSummarySerializer()
    address = serializers.CharField(source="seller.full_address")
    distance_km = serializers.SerializerMethodField()

    def get_distance_km(self, obj):
        return round(obj.distance_km, 2) if obj.distance_km is not None else None
