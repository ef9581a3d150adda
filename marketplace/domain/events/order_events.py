from dataclasses import dataclass
from decimal import Decimal

from .base import DomainEvent


@dataclass
class OrderPlacedEvent(DomainEvent):
    """Event: Order placed."""

    def __init__(self, order_id: str, order_number: str, customer_id: str, total: Decimal):
        super().__init__(
            event_type="order.placed",
            payload={
                "order_id": order_id,
                "order_number": order_number,
                "customer_id": customer_id,
                "total": str(total),
            },
        )


@dataclass
class OrderStatusChangedEvent(DomainEvent):
    """Event: Order moved to a new status."""

    def __init__(self, order_id: str, previous_status: str, status: str, changed_by: str):
        super().__init__(
            event_type="order.status_changed",
            payload={
                "order_id": order_id,
                "previous_status": previous_status,
                "status": status,
                "changed_by": changed_by,
            },
        )


@dataclass
class PaymentRecordedEvent(DomainEvent):
    """Event: Payment outcome recorded against an order ('payment.paid' or 'payment.failed')."""

    def __init__(self, order_id: str, outcome: str, payment_id: str):
        super().__init__(
            event_type=f"payment.{outcome}",
            payload={"order_id": order_id, "outcome": outcome, "payment_id": payment_id},
        )
