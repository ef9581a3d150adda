from .base import DomainEvent
from .order_events import OrderPlacedEvent, OrderStatusChangedEvent, PaymentRecordedEvent


__all__ = [
    "DomainEvent",
    "OrderPlacedEvent",
    "OrderStatusChangedEvent",
    "PaymentRecordedEvent",
]
