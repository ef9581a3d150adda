from django.conf import settings
from rest_framework import serializers

from marketplace.feedback.domain.models.feedback import Feedback


class FeedbackSerializer(serializers.ModelSerializer):
    # Public listing: the author's display name only, never contact details
    author_name = serializers.CharField(source="user.display_name", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True, default=None)
    order_number = serializers.CharField(source="order.order_number", read_only=True, default=None)

    class Meta:
        model = Feedback
        fields = [
            "id",
            "author_name",
            "product",
            "product_name",
            "order",
            "order_number",
            "type",
            "rating",
            "comment",
            "images",
            "status",
            "response",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class FeedbackCreateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Feedback.TYPE_CHOICES)
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField()
    product_id = serializers.UUIDField(required=False)
    order_id = serializers.UUIDField(required=False)
    images = serializers.ListField(child=serializers.URLField(), required=False)

    def validate(self, attrs):
        if attrs["type"] == Feedback.TYPE_PRODUCT and not attrs.get("product_id"):
            raise serializers.ValidationError({"product_id": "Product feedback must name a product."})
        return attrs


class FeedbackRespondSerializer(serializers.Serializer):
    response = serializers.CharField(required=False)
    status = serializers.ChoiceField(choices=Feedback.STATUS_CHOICES, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide a response or a status.")
        return attrs


class FeedbackListQuerySerializer(serializers.Serializer):
    """Query parameters for the feedback listing"""

    product_id = serializers.UUIDField(required=False)
    order_id = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=Feedback.STATUS_CHOICES, required=False)
    page = serializers.IntegerField(min_value=1, default=1)
    page_size = serializers.IntegerField(min_value=1, required=False)

    def validate_page_size(self, value):
        return min(value, getattr(settings, "MARKETPLACE_MAX_PAGE_SIZE", 100))
