from django.conf import settings
from rest_framework import serializers

from marketplace.catalog.api.serializers.user_serializers import CustomerSummarySerializer
from marketplace.ordering.domain.models.order import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ["id", "product", "seller", "product_name", "quantity", "unit_price", "line_total"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    customer = CustomerSummarySerializer(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer",
            "retailer",
            "items",
            "status",
            "payment_status",
            "payment_method",
            "fulfillment_method",
            "payment_id",
            "gateway_order_ref",
            "subtotal",
            "tax",
            "shipping",
            "total",
            "shipping_address",
            "scheduled_date",
            "delivery_date",
            "tracking_number",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# ===== Request Serializers =====


class ShippingAddressSerializer(serializers.Serializer):
    address = serializers.CharField(max_length=255)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    zip_code = serializers.CharField(max_length=20)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")


class OrderLineRequestSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class PlaceOrderRequestSerializer(serializers.Serializer):
    """Request body for placing an order"""

    items = OrderLineRequestSerializer(many=True, allow_empty=True, help_text="Lines to order")
    shipping_address = ShippingAddressSerializer()
    payment_method = serializers.ChoiceField(choices=Order.PAYMENT_METHOD_CHOICES, default="cod")
    fulfillment_method = serializers.ChoiceField(
        choices=Order.FULFILLMENT_METHOD_CHOICES, default=Order.FULFILLMENT_DELIVERY
    )
    scheduled_date = serializers.DateTimeField(required=False, allow_null=True, default=None)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    retailer_id = serializers.UUIDField(
        required=False,
        allow_null=True,
        default=None,
        help_text="Counterpart the order is placed for; the caller becomes the order's retailer",
    )


class UpdateOrderRequestSerializer(serializers.Serializer):
    """Request body for a seller updating an order"""

    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES, required=False)
    tracking_number = serializers.CharField(max_length=100, required=False, allow_blank=True)
    delivery_date = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide at least one of status, tracking_number, delivery_date")
        return attrs


class OrderListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES, required=False)
    page = serializers.IntegerField(min_value=1, default=1)
    page_size = serializers.IntegerField(min_value=1, required=False)

    def validate_page_size(self, value):
        return min(value, getattr(settings, "MARKETPLACE_MAX_PAGE_SIZE", 100))


class PaymentIntentRequestSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    currency = serializers.CharField(max_length=3, required=False)


class VerifyPaymentRequestSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    gateway_order_ref = serializers.CharField(max_length=255)
    payment_id = serializers.CharField(max_length=255)
    signature = serializers.CharField(max_length=255)
