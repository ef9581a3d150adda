"""
Mock Payment Provider
=====================

In-memory PaymentProviderInterface for tests and local development.

Webhook payloads are accepted when the signature header equals the hex
HMAC-SHA256 of the raw body keyed by STRIPE_WEBHOOK_SECRET.
"""

import hashlib
import hmac
import json
import logging
import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.conf import settings

from .interface import PaymentException, PaymentIntent, PaymentProviderInterface, WebhookEvent, to_minor_units
from .signatures import checkout_signature_matches


logger = logging.getLogger(__name__)


def sign_webhook_payload(secret: str, payload: bytes) -> str:
    return hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()


class MockPaymentProvider(PaymentProviderInterface):
    def __init__(self):
        self.webhook_secret = getattr(settings, "STRIPE_WEBHOOK_SECRET", "")
        self.signature_secret = getattr(settings, "PAYMENT_SIGNATURE_SECRET", "")
        self.created_intents: List[PaymentIntent] = []

    def create_payment_intent(
        self, amount: Decimal, currency: str, metadata: Optional[Dict[str, Any]] = None
    ) -> PaymentIntent:
        intent_id = f"pi_mock_{uuid.uuid4().hex[:24]}"
        intent = PaymentIntent(
            intent_id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid.uuid4().hex[:12]}",
            amount=to_minor_units(amount),
            currency=currency.lower(),
            metadata={key: str(value) for key, value in (metadata or {}).items()},
        )
        self.created_intents.append(intent)
        logger.info(f"[MOCK PAYMENT] Created intent {intent_id} for {intent.amount} {intent.currency}")
        return intent

    def verify_webhook(self, payload: bytes, signature: str) -> WebhookEvent:
        expected = sign_webhook_payload(self.webhook_secret, payload)
        if not signature or not hmac.compare_digest(expected, signature):
            raise PaymentException("Webhook signature verification failed")

        try:
            event = json.loads(payload)
            return WebhookEvent(
                event_id=event["id"],
                event_type=event["type"],
                data=event["data"]["object"],
                created_at=event.get("created", 0),
            )
        except (ValueError, KeyError, TypeError) as e:
            raise PaymentException("Invalid webhook payload") from e

    def verify_signature(self, gateway_order_ref: str, payment_id: str, signature: str) -> bool:
        return checkout_signature_matches(self.signature_secret, gateway_order_ref, payment_id, signature)
