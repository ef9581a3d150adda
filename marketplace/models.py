from marketplace.cart.domain.models import Cart, CartItem
from marketplace.catalog.domain.models import Product
from marketplace.feedback.domain.models import Feedback
from marketplace.ordering.domain.models import Order, OrderItem
from marketplace.support.domain.models import QueryResponse, SupportQuery


__all__ = [
    "Product",
    "Cart",
    "CartItem",
    "Order",
    "OrderItem",
    "Feedback",
    "SupportQuery",
    "QueryResponse",
]
