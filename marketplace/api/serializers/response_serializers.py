"""
Response Serializers for Marketplace API Documentation

These serializers define the structure of API responses for OpenAPI schema generation.
They are NOT used for data validation, only for documentation in Swagger/ReDoc.
"""

from rest_framework import serializers

# ===== Common Response Serializers =====


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    detail = serializers.CharField(help_text="Human-readable error message")
    code = serializers.CharField(help_text="Error code identifier (e.g. insufficient_stock)", required=False)


class PaginatedResponseSerializer(serializers.Serializer):
    """Pagination envelope shared by list endpoints"""

    count = serializers.IntegerField(help_text="Total number of matches before pagination")
    page = serializers.IntegerField(help_text="Current page number")
    page_size = serializers.IntegerField(help_text="Items per page")
    num_pages = serializers.IntegerField(help_text="Total number of pages (0 when nothing matches)")
    has_next = serializers.BooleanField(help_text="Whether there is a next page")
    has_previous = serializers.BooleanField(help_text="Whether there is a previous page")


# ===== Product Response Serializers =====


class ProductListResponseSerializer(PaginatedResponseSerializer):
    """Paginated product list response"""

    results = serializers.ListField(child=serializers.DictField(), help_text="Products (see ProductSerializer)")


# ===== Cart Response Serializers =====


class CartTotalsSerializer(serializers.Serializer):
    """Cart totals breakdown"""

    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, help_text="Sum of all lines")
    tax = serializers.DecimalField(max_digits=12, decimal_places=2, help_text="Tax on the subtotal")
    shipping = serializers.DecimalField(max_digits=12, decimal_places=2, help_text="Flat shipping, 0 for pickup")
    total = serializers.DecimalField(max_digits=12, decimal_places=2, help_text="Final total amount")
    item_count = serializers.IntegerField(help_text="Total units across lines")


class CartResponseSerializer(serializers.Serializer):
    """Complete cart response"""

    id = serializers.IntegerField(help_text="Cart ID")
    items = serializers.ListField(child=serializers.DictField(), help_text="Cart lines")
    items_count = serializers.IntegerField(help_text="Number of lines")
    totals = CartTotalsSerializer(help_text="Cart totals")


# ===== Order Response Serializers =====


class OrderListResponseSerializer(PaginatedResponseSerializer):
    """Paginated order list"""

    results = serializers.ListField(child=serializers.DictField(), help_text="Orders (see OrderSerializer)")


# ===== Payment Response Serializers =====


class PaymentIntentResponseSerializer(serializers.Serializer):
    client_secret = serializers.CharField(help_text="Secret the client confirms the payment with")
    payment_intent_id = serializers.CharField(help_text="Gateway payment intent ID")
    amount = serializers.IntegerField(help_text="Amount in the smallest currency unit")
    currency = serializers.CharField(help_text="ISO currency code")


class WebhookResponseSerializer(serializers.Serializer):
    handled = serializers.BooleanField(help_text="Whether the event changed an order")
    event_type = serializers.CharField(help_text="Gateway event type")


class VerifyPaymentResponseSerializer(serializers.Serializer):
    verified = serializers.BooleanField(help_text="Whether the checkout signature matched")
    order = serializers.DictField(help_text="Updated order (see OrderSerializer)")


# ===== Discovery Response Serializers =====


class ShopListResponseSerializer(serializers.Serializer):
    count = serializers.IntegerField(help_text="Number of shops returned")
    results = serializers.ListField(child=serializers.DictField(), help_text="Shops, nearest first")


# ===== Feedback & Support Response Serializers =====


class FeedbackListResponseSerializer(PaginatedResponseSerializer):
    results = serializers.ListField(child=serializers.DictField(), help_text="Feedback (see FeedbackSerializer)")


class SupportQueryListResponseSerializer(PaginatedResponseSerializer):
    results = serializers.ListField(child=serializers.DictField(), help_text="Queries (see SupportQuerySerializer)")
