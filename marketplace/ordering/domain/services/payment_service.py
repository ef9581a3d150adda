"""
PaymentService - Payment Gateway Reconciliation

Creates payment intents for orders and turns gateway callbacks (signed
webhooks and client-side checkout signatures) into recorded payment
outcomes through OrderService.mark_payment_result.
"""

import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError

from infrastructure.payments import PaymentException, PaymentProviderInterface
from marketplace.ordering.domain.models.order import Order
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

from .order_service import OrderService


User = get_user_model()
logger = logging.getLogger(__name__)

WEBHOOK_OUTCOMES = {
    "payment_intent.succeeded": Order.PAYMENT_PAID,
    "payment_intent.payment_failed": Order.PAYMENT_FAILED,
}

# Errors that retrying the webhook can never fix; acknowledged so the gateway stops redelivering
UNRECOVERABLE_WEBHOOK_ERRORS = (ErrorCodes.ORDER_NOT_FOUND, ErrorCodes.ORDER_ALREADY_PAID)


class PaymentService(BaseService):
    """
    Service for payment intents and payment confirmations.

    Dependencies:
    - OrderService: Records outcomes (idempotent)
    - PaymentProviderInterface: Stripe in production, mock in tests
    """

    def __init__(self, order_service: OrderService = None, payment_provider: PaymentProviderInterface = None):
        super().__init__()
        if order_service is None or payment_provider is None:
            from infrastructure.container import container

            order_service = order_service or container.order_service()
            payment_provider = payment_provider or container.payment()
        self.order_service = order_service
        self.payment_provider = payment_provider

    @BaseService.log_performance
    def create_payment_intent(
        self, order_id, user: User, currency: Optional[str] = None
    ) -> ServiceResult[Dict[str, Any]]:
        """
        Create a gateway payment intent for an order's total.

        Only the order's customer or placing retailer may pay for it.

        Returns:
            ServiceResult with client_secret, payment_intent_id, amount
            (minor units) and currency
        """
        try:
            try:
                order = Order.objects.get(id=order_id)
            except (Order.DoesNotExist, ValidationError, ValueError):
                return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")

            if user.id not in (order.customer_id, order.retailer_id):
                return service_err(ErrorCodes.PERMISSION_DENIED, "You don't have permission to pay for this order")

            if order.payment_status == Order.PAYMENT_PAID:
                return service_err(ErrorCodes.ORDER_ALREADY_PAID, f"Order {order.order_number} is already paid")

            if order.status == Order.STATUS_CANCELLED:
                return service_err(ErrorCodes.INVALID_ORDER_STATE, f"Order {order.order_number} was cancelled")

            currency = currency or getattr(settings, "DEFAULT_CURRENCY", "inr")
            try:
                intent = self.payment_provider.create_payment_intent(
                    amount=order.total,
                    currency=currency,
                    metadata={"order_id": str(order.id), "user_id": str(user.id)},
                )
            except PaymentException as e:
                self.logger.error(f"Payment intent for order {order.order_number} failed: {e}")
                return service_err(ErrorCodes.PAYMENT_PROVIDER_ERROR, str(e))

            order.gateway_order_ref = intent.intent_id
            order.save(update_fields=["gateway_order_ref", "updated_at"])

            self.logger.info(f"Created payment intent {intent.intent_id} for order {order.order_number}")
            return service_ok(
                {
                    "client_secret": intent.client_secret,
                    "payment_intent_id": intent.intent_id,
                    "amount": intent.amount,
                    "currency": intent.currency,
                }
            )

        except Exception as e:
            self.logger.error(f"Error creating payment intent for order {order_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def handle_webhook(self, payload: bytes, signature: str) -> ServiceResult[Dict[str, Any]]:
        """
        Verify a gateway webhook and record the payment outcome it reports.

        Event types other than payment success and failure are acknowledged
        with ``handled=False``.
        """
        try:
            try:
                event = self.payment_provider.verify_webhook(payload, signature)
            except PaymentException as e:
                self.logger.warning(f"Rejected webhook: {e}")
                return service_err(ErrorCodes.INVALID_WEBHOOK, str(e))

            outcome = WEBHOOK_OUTCOMES.get(event.event_type)
            if outcome is None:
                self.logger.info(f"Ignoring webhook event {event.event_id} of type {event.event_type}")
                return service_ok({"handled": False, "event_type": event.event_type})

            order_id = event.metadata.get("order_id")
            if not order_id:
                self.logger.warning(f"Webhook event {event.event_id} carries no order_id, ignoring")
                return service_ok({"handled": False, "event_type": event.event_type})

            result = self.order_service.mark_payment_result(order_id, outcome, event.data.get("id", ""))
            if not result.ok:
                if result.error in UNRECOVERABLE_WEBHOOK_ERRORS:
                    self.logger.warning(
                        f"Webhook event {event.event_id} for order {order_id} not applied: {result.error_detail}"
                    )
                    return service_ok({"handled": False, "event_type": event.event_type, "order_id": order_id})
                return result

            return service_ok(
                {
                    "handled": True,
                    "event_type": event.event_type,
                    "order_id": order_id,
                    "payment_status": result.value.payment_status,
                }
            )

        except Exception as e:
            self.logger.error(f"Error handling payment webhook: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def verify_payment(
        self, order_id, user: User, gateway_order_ref: str, payment_id: str, signature: str
    ) -> ServiceResult[Dict[str, Any]]:
        """
        Check a checkout signature returned to the client by the gateway.

        The gateway reference must be the one issued for this order by
        ``create_payment_intent``; a signature made for another order is
        refused without touching the payment status. Otherwise a valid
        signature records the order as paid, an invalid one as failed.
        """
        try:
            try:
                order = Order.objects.get(id=order_id)
            except (Order.DoesNotExist, ValidationError, ValueError):
                return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")

            if user.id not in (order.customer_id, order.retailer_id):
                return service_err(ErrorCodes.PERMISSION_DENIED, "You don't have permission to pay for this order")

            if not order.gateway_order_ref or order.gateway_order_ref != gateway_order_ref:
                self.logger.warning(
                    f"Checkout reference {gateway_order_ref!r} does not belong to order {order.order_number}"
                )
                return service_err(
                    ErrorCodes.PAYMENT_REFERENCE_MISMATCH,
                    f"Payment reference does not match order {order.order_number}",
                )

            verified = self.payment_provider.verify_signature(gateway_order_ref, payment_id, signature)
            outcome = Order.PAYMENT_PAID if verified else Order.PAYMENT_FAILED

            result = self.order_service.mark_payment_result(order.id, outcome, payment_id)
            if not result.ok:
                return result

            self.logger.info(f"Checkout signature for order {order.order_number} verified={verified}")
            return service_ok({"verified": verified, "order": result.value})

        except Exception as e:
            self.logger.error(f"Error verifying payment for order {order_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
