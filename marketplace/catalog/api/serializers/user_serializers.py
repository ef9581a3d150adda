from django.contrib.auth import get_user_model
from rest_framework import serializers


User = get_user_model()


class SellerSummarySerializer(serializers.ModelSerializer):
    """Public seller info shown next to products and shops"""

    class Meta:
        model = User
        fields = ["id", "name", "business_name", "role", "city", "state", "latitude", "longitude"]
        read_only_fields = fields


class CustomerSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "email", "phone", "role"]
        read_only_fields = fields
