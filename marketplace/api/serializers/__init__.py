# Marketplace API Serializers

# Import response serializers for API documentation
from .response_serializers import (
    CartResponseSerializer,
    ErrorResponseSerializer,
    FeedbackListResponseSerializer,
    OrderListResponseSerializer,
    PaymentIntentResponseSerializer,
    ProductListResponseSerializer,
    ShopListResponseSerializer,
    SupportQueryListResponseSerializer,
    VerifyPaymentResponseSerializer,
    WebhookResponseSerializer,
)


__all__ = [
    # Response serializers for documentation
    "ErrorResponseSerializer",
    "ProductListResponseSerializer",
    "CartResponseSerializer",
    "OrderListResponseSerializer",
    "PaymentIntentResponseSerializer",
    "WebhookResponseSerializer",
    "VerifyPaymentResponseSerializer",
    "ShopListResponseSerializer",
    "FeedbackListResponseSerializer",
    "SupportQueryListResponseSerializer",
]
