"""
Payment Service Abstraction Layer
==================================

Provides a unified interface for payment operations across different payment providers.
"""

from .factory import PaymentFactory
from .interface import PaymentException, PaymentIntent, PaymentProviderInterface, WebhookEvent, to_minor_units
from .mock_provider import MockPaymentProvider, sign_webhook_payload
from .signatures import checkout_signature_matches, compute_checkout_signature
from .stripe_provider import StripeProvider


__all__ = [
    "PaymentProviderInterface",
    "PaymentIntent",
    "WebhookEvent",
    "PaymentException",
    "StripeProvider",
    "MockPaymentProvider",
    "PaymentFactory",
    "to_minor_units",
    "sign_webhook_payload",
    "compute_checkout_signature",
    "checkout_signature_matches",
]
