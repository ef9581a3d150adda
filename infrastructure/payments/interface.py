"""
Payment Provider Interface
===========================

Abstract base class defining the contract for payment operations:
intent creation, webhook verification and checkout signature checks.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional


@dataclass
class PaymentIntent:
    """
    Represents a payment intent created at the gateway.

    Attributes:
        intent_id: Gateway identifier of the intent
        client_secret: Secret the client uses to confirm the payment
        amount: Amount in the smallest currency unit
        currency: ISO currency code (lowercase)
        metadata: Correlation data (order_id, user_id)
    """

    intent_id: str
    client_secret: str
    amount: int
    currency: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class WebhookEvent:
    """
    Represents a verified webhook event from the payment provider.

    Attributes:
        event_id: Unique event identifier
        event_type: Provider event type (e.g. 'payment_intent.succeeded')
        data: Event object payload
        created_at: Event creation timestamp (epoch seconds)
    """

    event_id: str
    event_type: str
    data: Dict[str, Any]
    created_at: int

    @property
    def metadata(self) -> Dict[str, Any]:
        return self.data.get("metadata") or {}


def to_minor_units(amount: Decimal) -> int:
    """Convert a major-unit amount (e.g. 340.00) to minor units (34000)."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentProviderInterface(ABC):
    """
    Abstract interface for payment provider operations.

    Concrete implementations:
        - StripeProvider: Stripe payment processing
        - MockPaymentProvider: Deterministic in-memory provider for tests
    """

    @abstractmethod
    def create_payment_intent(
        self, amount: Decimal, currency: str, metadata: Optional[Dict[str, Any]] = None
    ) -> PaymentIntent:
        """
        Create a payment intent.

        Args:
            amount: Amount in major units
            currency: ISO currency code
            metadata: Correlation data echoed back in webhook events

        Raises:
            PaymentException: If intent creation fails
        """
        pass

    @abstractmethod
    def verify_webhook(self, payload: bytes, signature: str) -> WebhookEvent:
        """
        Verify and parse webhook event from payment provider.

        Raises:
            PaymentException: If the payload or signature is invalid
        """
        pass

    @abstractmethod
    def verify_signature(self, gateway_order_ref: str, payment_id: str, signature: str) -> bool:
        """
        Check a client-side checkout signature.

        The expected signature is the hex HMAC-SHA256 of
        ``"<gateway_order_ref>|<payment_id>"`` keyed by the gateway secret.
        """
        pass


class PaymentException(Exception):
    """Base exception for payment operations."""

    pass
