from .order_service import OrderService, generate_order_number
from .payment_service import PaymentService


__all__ = [
    "OrderService",
    "PaymentService",
    "generate_order_number",
]
