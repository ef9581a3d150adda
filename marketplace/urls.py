from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .api.views import prometheus_metrics
from .cart.api.views.cart_views import CartViewSet
from .catalog.api.views.product_views import ProductViewSet
from .discovery.api.views.shop_views import ShopViewSet
from .feedback.api.views.feedback_views import FeedbackViewSet
from .ordering.api.views.order_views import OrderViewSet
from .ordering.api.views.payment_views import PaymentViewSet
from .support.api.views.support_views import SupportQueryViewSet


# Create the main router
router = DefaultRouter()
router.register(r"products", ProductViewSet, basename="product")
router.register(r"cart", CartViewSet, basename="cart")
router.register(r"orders", OrderViewSet, basename="order")
router.register(r"payments", PaymentViewSet, basename="payment")
router.register(r"shops", ShopViewSet, basename="shop")
router.register(r"feedback", FeedbackViewSet, basename="feedback")
router.register(r"queries", SupportQueryViewSet, basename="query")

app_name = "marketplace"

urlpatterns = [
    # Prometheus metrics endpoint
    path("metrics/", prometheus_metrics.marketplace_prometheus_metrics, name="marketplace-metrics"),
    # Main API routes
    path("", include(router.urls)),
]
