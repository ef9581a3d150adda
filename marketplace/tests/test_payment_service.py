import json
import uuid
from decimal import Decimal
from unittest.mock import Mock

from django.conf import settings
from django.test import TestCase

from infrastructure.container import container
from infrastructure.payments import PaymentException
from infrastructure.payments.mock_provider import sign_webhook_payload
from infrastructure.payments.signatures import compute_checkout_signature
from marketplace.models import Order
from marketplace.services import ErrorCodes, PaymentService
from marketplace.tests.factories import OrderFactory, RetailerFactory, UserFactory


def webhook_body(event_type, order_id=None, intent_id="pi_test_123"):
    metadata = {"order_id": str(order_id)} if order_id else {}
    return json.dumps(
        {
            "id": f"evt_{uuid.uuid4().hex[:12]}",
            "type": event_type,
            "data": {"object": {"id": intent_id, "metadata": metadata}},
            "created": 1700000000,
        }
    ).encode()


class CreatePaymentIntentTest(TestCase):
    def setUp(self):
        self.service = container.payment_service()
        self.provider = container.payment()
        self.customer = UserFactory()
        self.order = OrderFactory(customer=self.customer, total=Decimal("340.00"))

    def test_intent_amount_in_minor_units(self):
        result = self.service.create_payment_intent(self.order.id, self.customer)

        self.assertTrue(result.ok)
        self.assertEqual(result.value["amount"], 34000)
        self.assertEqual(result.value["currency"], "inr")
        self.assertTrue(result.value["client_secret"])
        intent = self.provider.created_intents[-1]
        self.assertEqual(intent.metadata["order_id"], str(self.order.id))
        self.order.refresh_from_db()
        self.assertEqual(self.order.gateway_order_ref, result.value["payment_intent_id"])

    def test_placing_retailer_may_pay(self):
        retailer = RetailerFactory()
        order = OrderFactory(customer=self.customer, retailer=retailer)

        self.assertTrue(self.service.create_payment_intent(order.id, retailer).ok)

    def test_stranger_cannot_pay(self):
        result = self.service.create_payment_intent(self.order.id, UserFactory())

        self.assertEqual(result.error, ErrorCodes.PERMISSION_DENIED)
        self.assertEqual(self.provider.created_intents, [])

    def test_paid_order_rejected(self):
        Order.objects.filter(id=self.order.id).update(payment_status=Order.PAYMENT_PAID)

        result = self.service.create_payment_intent(self.order.id, self.customer)

        self.assertEqual(result.error, ErrorCodes.ORDER_ALREADY_PAID)

    def test_cancelled_order_rejected(self):
        Order.objects.filter(id=self.order.id).update(status=Order.STATUS_CANCELLED)

        result = self.service.create_payment_intent(self.order.id, self.customer)

        self.assertEqual(result.error, ErrorCodes.INVALID_ORDER_STATE)

    def test_unknown_order(self):
        result = self.service.create_payment_intent(uuid.uuid4(), self.customer)

        self.assertEqual(result.error, ErrorCodes.ORDER_NOT_FOUND)

    def test_provider_failure(self):
        provider = Mock()
        provider.create_payment_intent.side_effect = PaymentException("gateway down")
        service = PaymentService(order_service=container.order_service(), payment_provider=provider)

        result = service.create_payment_intent(self.order.id, self.customer)

        self.assertEqual(result.error, ErrorCodes.PAYMENT_PROVIDER_ERROR)


class HandleWebhookTest(TestCase):
    def setUp(self):
        self.service = container.payment_service()
        self.order = OrderFactory()

    def deliver(self, body, signature=None):
        if signature is None:
            signature = sign_webhook_payload(settings.STRIPE_WEBHOOK_SECRET, body)
        return self.service.handle_webhook(body, signature)

    def test_success_event_marks_order_paid(self):
        result = self.deliver(webhook_body("payment_intent.succeeded", self.order.id))

        self.assertTrue(result.ok)
        self.assertTrue(result.value["handled"])
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PAID)
        self.assertEqual(self.order.status, Order.STATUS_CONFIRMED)
        self.assertEqual(self.order.payment_id, "pi_test_123")

    def test_redelivered_event_is_harmless(self):
        body = webhook_body("payment_intent.succeeded", self.order.id)

        self.deliver(body)
        result = self.deliver(body)

        self.assertTrue(result.ok)
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PAID)

    def test_failure_event_marks_order_failed(self):
        result = self.deliver(webhook_body("payment_intent.payment_failed", self.order.id))

        self.assertTrue(result.value["handled"])
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PAYMENT_FAILED)
        self.assertEqual(self.order.status, Order.STATUS_PENDING)

    def test_bad_signature_rejected(self):
        result = self.deliver(webhook_body("payment_intent.succeeded", self.order.id), signature="forged")

        self.assertEqual(result.error, ErrorCodes.INVALID_WEBHOOK)
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PENDING)

    def test_unrelated_event_type_acknowledged(self):
        result = self.deliver(webhook_body("charge.refunded", self.order.id))

        self.assertTrue(result.ok)
        self.assertFalse(result.value["handled"])

    def test_event_without_order_acknowledged(self):
        result = self.deliver(webhook_body("payment_intent.succeeded"))

        self.assertTrue(result.ok)
        self.assertFalse(result.value["handled"])

    def test_unknown_order_acknowledged(self):
        result = self.deliver(webhook_body("payment_intent.succeeded", uuid.uuid4()))

        self.assertTrue(result.ok)
        self.assertFalse(result.value["handled"])

    def test_failure_after_payment_acknowledged_without_change(self):
        self.deliver(webhook_body("payment_intent.succeeded", self.order.id))

        result = self.deliver(webhook_body("payment_intent.payment_failed", self.order.id, intent_id="pi_other"))

        self.assertTrue(result.ok)
        self.assertFalse(result.value["handled"])
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PAID)


class VerifyPaymentTest(TestCase):
    def setUp(self):
        self.service = container.payment_service()
        self.customer = UserFactory()
        self.order = OrderFactory(customer=self.customer, gateway_order_ref="gw_order_1")

    def test_valid_signature_marks_paid(self):
        signature = compute_checkout_signature(settings.PAYMENT_SIGNATURE_SECRET, "gw_order_1", "pay_1")

        result = self.service.verify_payment(self.order.id, self.customer, "gw_order_1", "pay_1", signature)

        self.assertTrue(result.ok)
        self.assertTrue(result.value["verified"])
        self.assertEqual(result.value["order"].payment_status, Order.PAYMENT_PAID)

    def test_invalid_signature_marks_failed(self):
        result = self.service.verify_payment(self.order.id, self.customer, "gw_order_1", "pay_1", "bad")

        self.assertTrue(result.ok)
        self.assertFalse(result.value["verified"])
        self.assertEqual(result.value["order"].payment_status, Order.PAYMENT_FAILED)

    def test_stranger_cannot_verify(self):
        result = self.service.verify_payment(self.order.id, UserFactory(), "gw_order_1", "pay_1", "bad")

        self.assertEqual(result.error, ErrorCodes.PERMISSION_DENIED)

    def test_signature_for_another_order_is_refused(self):
        expensive = OrderFactory(customer=self.customer, total=Decimal("99999.00"), gateway_order_ref="gw_order_2")
        signature = compute_checkout_signature(settings.PAYMENT_SIGNATURE_SECRET, "gw_order_1", "pay_1")

        result = self.service.verify_payment(expensive.id, self.customer, "gw_order_1", "pay_1", signature)

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ErrorCodes.PAYMENT_REFERENCE_MISMATCH)
        expensive.refresh_from_db()
        self.assertEqual(expensive.payment_status, Order.PAYMENT_PENDING)
        self.assertEqual(expensive.status, Order.STATUS_PENDING)

    def test_order_without_intent_cannot_be_verified(self):
        fresh = OrderFactory(customer=self.customer)
        signature = compute_checkout_signature(settings.PAYMENT_SIGNATURE_SECRET, "", "pay_1")

        result = self.service.verify_payment(fresh.id, self.customer, "", "pay_1", signature)

        self.assertEqual(result.error, ErrorCodes.PAYMENT_REFERENCE_MISMATCH)

    def test_reference_issued_by_intent_verifies(self):
        fresh = OrderFactory(customer=self.customer)
        ref = self.service.create_payment_intent(fresh.id, self.customer).value["payment_intent_id"]
        signature = compute_checkout_signature(settings.PAYMENT_SIGNATURE_SECRET, ref, "pay_9")

        result = self.service.verify_payment(fresh.id, self.customer, ref, "pay_9", signature)

        self.assertTrue(result.ok)
        self.assertEqual(result.value["order"].payment_status, Order.PAYMENT_PAID)
