"""
Stripe Payment Provider
========================

Concrete implementation of PaymentProviderInterface using Stripe.
"""

import json
import logging
from decimal import Decimal
from typing import Any, Dict, Optional

import stripe
from django.conf import settings
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .interface import PaymentException, PaymentIntent, PaymentProviderInterface, WebhookEvent, to_minor_units
from .signatures import checkout_signature_matches


logger = logging.getLogger(__name__)


class StripeProvider(PaymentProviderInterface):
    """
    Stripe payment provider implementation.

    Configuration (in settings.py):
        STRIPE_SECRET_KEY: Stripe secret API key
        STRIPE_WEBHOOK_SECRET: Webhook endpoint secret for signature verification
        PAYMENT_SIGNATURE_SECRET: Key for client-side checkout signatures
    """

    def __init__(self):
        """Initialize Stripe provider with API credentials."""
        stripe.api_key = getattr(settings, "STRIPE_SECRET_KEY", "")
        self.webhook_secret = getattr(settings, "STRIPE_WEBHOOK_SECRET", "")
        self.signature_secret = getattr(settings, "PAYMENT_SIGNATURE_SECRET", "")

        if not stripe.api_key:
            logger.warning("STRIPE_SECRET_KEY not configured")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(
            (
                stripe.RateLimitError,
                stripe.APIConnectionError,
                stripe.APIError,
            )
        ),
        reraise=True,
    )
    def _create_payment_intent_api(self, **kwargs):
        """Internal method to create a payment intent with retries."""
        return stripe.PaymentIntent.create(**kwargs)

    def create_payment_intent(
        self, amount: Decimal, currency: str, metadata: Optional[Dict[str, Any]] = None
    ) -> PaymentIntent:
        metadata = {key: str(value) for key, value in (metadata or {}).items()}
        amount_minor = to_minor_units(amount)

        try:
            intent = self._create_payment_intent_api(
                amount=amount_minor,
                currency=currency.lower(),
                metadata=metadata,
            )
        except stripe.StripeError as e:
            logger.error(f"Failed to create payment intent for {metadata}: {str(e)}")
            raise PaymentException(f"Payment intent creation failed: {str(e)}") from e

        logger.info(f"Created Stripe payment intent {intent.id} for {amount_minor} {currency}")

        return PaymentIntent(
            intent_id=intent.id,
            client_secret=intent.client_secret,
            amount=intent.amount,
            currency=intent.currency,
            metadata=dict(intent.metadata or {}),
        )

    def verify_webhook(self, payload: bytes, signature: str) -> WebhookEvent:
        """
        Verify Stripe webhook signature and parse event.

        Args:
            payload: Raw webhook payload bytes
            signature: Stripe-Signature header value

        Raises:
            PaymentException: If verification fails
        """
        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except ValueError as e:
            logger.error(f"Invalid webhook payload: {str(e)}")
            raise PaymentException("Invalid webhook payload") from e
        except stripe.SignatureVerificationError as e:
            logger.error(f"Webhook signature verification failed: {str(e)}")
            raise PaymentException("Webhook signature verification failed") from e

        logger.info(f"Verified Stripe webhook event: {event['type']}")

        # construct_event only authenticates; the plain dict view comes from the raw body
        body = json.loads(payload)
        return WebhookEvent(
            event_id=body["id"],
            event_type=body["type"],
            data=body["data"]["object"],
            created_at=body["created"],
        )

    def verify_signature(self, gateway_order_ref: str, payment_id: str, signature: str) -> bool:
        verified = checkout_signature_matches(self.signature_secret, gateway_order_ref, payment_id, signature)
        logger.info(f"Checkout signature for payment {payment_id}: {'valid' if verified else 'invalid'}")
        return verified
