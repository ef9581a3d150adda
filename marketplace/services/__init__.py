"""
Marketplace Service Layer

This package contains all business logic for the marketplace app, organized
into domain services.

Services:
- CatalogService: Product browsing, location filtering, and CRUD
- CartService: Shopping cart operations
- InventoryService: Conditional stock decrements and restocking
- PricingService: Subtotal, tax, shipping and total calculations
- OrderService: Order placement, status lifecycle and payment recording
- PaymentService: Payment intents, webhooks and checkout signatures
- ShopProximityService: Nearby retailer and wholesaler discovery
- FeedbackService: Ratings, comments, seller replies and moderation
- SupportService: Support queries and their reply threads

Usage:
    from marketplace.services import CatalogService, service_ok, service_err

    catalog_service = container.catalog_service()
    result = catalog_service.list_products(filters={"search": "rice"})

    if result.ok:
        products = result.value["results"]
    else:
        error = result.error
"""

from .base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok

from marketplace.cart.domain.services import CartService, InventoryService, PricingService  # noqa: E402 isort: skip
from marketplace.catalog.domain.services import CatalogService  # noqa: E402 isort: skip
from marketplace.discovery.domain.services import ShopProximityService  # noqa: E402 isort: skip
from marketplace.feedback.domain.services import FeedbackService  # noqa: E402 isort: skip
from marketplace.ordering.domain.services import OrderService, PaymentService  # noqa: E402 isort: skip
from marketplace.support.domain.services import SupportService  # noqa: E402 isort: skip


__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    # Helper functions
    "service_ok",
    "service_err",
    "paginate",
    # Error codes
    "ErrorCodes",
    # Services
    "CatalogService",
    "CartService",
    "InventoryService",
    "OrderService",
    "PaymentService",
    "PricingService",
    "ShopProximityService",
    "FeedbackService",
    "SupportService",
]
