from django.conf import settings
from rest_framework import serializers

from marketplace.catalog.api.serializers.user_serializers import CustomerSummarySerializer
from marketplace.support.domain.models.support_query import QueryResponse, SupportQuery


class QueryResponseSerializer(serializers.ModelSerializer):
    author_name = serializers.CharField(source="user.display_name", read_only=True, default=None)
    author_role = serializers.CharField(source="user.role", read_only=True, default=None)

    class Meta:
        model = QueryResponse
        fields = ["id", "author_name", "author_role", "message", "created_at"]
        read_only_fields = fields


class SupportQuerySerializer(serializers.ModelSerializer):
    user = CustomerSummarySerializer(read_only=True)
    order_number = serializers.CharField(source="order.order_number", read_only=True, default=None)
    product_name = serializers.CharField(source="product.name", read_only=True, default=None)
    responses = QueryResponseSerializer(many=True, read_only=True)

    class Meta:
        model = SupportQuery
        fields = [
            "id",
            "user",
            "order",
            "order_number",
            "product",
            "product_name",
            "subject",
            "message",
            "status",
            "responses",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class SupportQueryCreateSerializer(serializers.Serializer):
    subject = serializers.CharField(max_length=200)
    message = serializers.CharField()
    order_id = serializers.UUIDField(required=False)
    product_id = serializers.UUIDField(required=False)


class SupportQueryUpdateSerializer(serializers.Serializer):
    message = serializers.CharField(required=False)
    status = serializers.ChoiceField(choices=SupportQuery.STATUS_CHOICES, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide a message or a status.")
        return attrs


class SupportQueryListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=SupportQuery.STATUS_CHOICES, required=False)
    page = serializers.IntegerField(min_value=1, default=1)
    page_size = serializers.IntegerField(min_value=1, required=False)

    def validate_page_size(self, value):
        return min(value, getattr(settings, "MARKETPLACE_MAX_PAGE_SIZE", 100))
