from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework import serializers

from marketplace.catalog.domain.models.catalog import Product

from .user_serializers import SellerSummarySerializer


User = get_user_model()


class ProductSerializer(serializers.ModelSerializer):
    seller = SellerSummarySerializer(read_only=True)
    distance_km = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "category",
            "subcategory",
            "seller",
            "seller_type",
            "is_proxy",
            "proxy_source",
            "price",
            "stock",
            "min_order_quantity",
            "availability_date",
            "images",
            "specifications",
            "tags",
            "status",
            "distance_km",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_distance_km(self, obj):
        # Only present when the listing was filtered by location
        distance = getattr(obj, "distance_km", None)
        return round(distance, 2) if distance is not None else None


class ProductWriteSerializer(serializers.ModelSerializer):
    """Input for create (all required fields) and partial update"""

    proxy_source = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role="wholesaler"), required=False, allow_null=True
    )
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    images = serializers.ListField(child=serializers.URLField(), required=False)

    class Meta:
        model = Product
        fields = [
            "name",
            "description",
            "category",
            "subcategory",
            "price",
            "stock",
            "min_order_quantity",
            "availability_date",
            "images",
            "specifications",
            "tags",
            "status",
            "is_proxy",
            "proxy_source",
        ]

    def validate_min_order_quantity(self, value):
        if value < 1:
            raise serializers.ValidationError("Minimum order quantity must be at least 1")
        return value


class ProductListQuerySerializer(serializers.Serializer):
    """Query parameters for the product listing"""

    category = serializers.CharField(required=False)
    search = serializers.CharField(required=False)
    min_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, min_value=0)
    max_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, min_value=0)
    in_stock = serializers.BooleanField(required=False, allow_null=True, default=None)
    seller = serializers.UUIDField(required=False)
    seller_type = serializers.ChoiceField(choices=Product.SELLER_TYPE_CHOICES, required=False)
    lat = serializers.FloatField(required=False, min_value=-90, max_value=90)
    lng = serializers.FloatField(required=False, min_value=-180, max_value=180)
    radius_km = serializers.FloatField(required=False, min_value=0)
    sort = serializers.ChoiceField(choices=["created_at", "price", "name"], default="created_at")
    order = serializers.ChoiceField(choices=["asc", "desc"], default="desc")
    page = serializers.IntegerField(min_value=1, default=1)
    page_size = serializers.IntegerField(min_value=1, required=False)

    def validate_page_size(self, value):
        return min(value, getattr(settings, "MARKETPLACE_MAX_PAGE_SIZE", 100))
