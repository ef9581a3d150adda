import json
from decimal import Decimal

from django.conf import settings
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.payments.mock_provider import sign_webhook_payload
from infrastructure.payments.signatures import compute_checkout_signature
from marketplace.models import Order
from marketplace.tests.factories import OrderFactory, UserFactory


class PaymentViewIntegrationTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.customer = UserFactory()
        self.order = OrderFactory(customer=self.customer, total=Decimal("340.00"), gateway_order_ref="gw_1")

        self.intent_url = reverse("marketplace:payment-intent")
        self.webhook_url = reverse("marketplace:payment-webhook")
        self.verify_url = reverse("marketplace:payment-verify")

    def post_webhook(self, event_type, signature=None):
        body = json.dumps(
            {
                "id": "evt_1",
                "type": event_type,
                "data": {"object": {"id": "pi_web_1", "metadata": {"order_id": str(self.order.id)}}},
                "created": 1700000000,
            }
        ).encode()
        if signature is None:
            signature = sign_webhook_payload(settings.STRIPE_WEBHOOK_SECRET, body)
        return self.client.generic(
            "POST", self.webhook_url, body, content_type="application/json", HTTP_STRIPE_SIGNATURE=signature
        )

    def test_create_intent(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(self.intent_url, {"order_id": str(self.order.id)}, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["amount"], 34000)
        self.assertTrue(response.data["payment_intent_id"].startswith("pi_mock_"))

    def test_intent_for_someone_elses_order(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.post(self.intent_url, {"order_id": str(self.order.id)}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_intent_for_paid_order(self):
        Order.objects.filter(id=self.order.id).update(payment_status=Order.PAYMENT_PAID)
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(self.intent_url, {"order_id": str(self.order.id)}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_intent_requires_authentication(self):
        response = self.client.post(self.intent_url, {"order_id": str(self.order.id)}, format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_signed_webhook_marks_order_paid_without_user(self):
        response = self.post_webhook("payment_intent.succeeded")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["handled"])
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PAID)

    def test_forged_webhook_rejected(self):
        response = self.post_webhook("payment_intent.succeeded", signature="0" * 64)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "invalid_webhook")
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PENDING)

    def test_verify_checkout_signature(self):
        self.client.force_authenticate(user=self.customer)
        signature = compute_checkout_signature(settings.PAYMENT_SIGNATURE_SECRET, "gw_1", "pay_1")

        response = self.client.post(
            self.verify_url,
            {"order_id": str(self.order.id), "gateway_order_ref": "gw_1", "payment_id": "pay_1", "signature": signature},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["verified"])
        self.assertEqual(response.data["order"]["payment_status"], "paid")
        self.assertEqual(response.data["order"]["status"], "confirmed")

    def test_verify_rejects_reference_from_another_order(self):
        other = OrderFactory(customer=self.customer, gateway_order_ref="gw_other")
        self.client.force_authenticate(user=self.customer)
        signature = compute_checkout_signature(settings.PAYMENT_SIGNATURE_SECRET, "gw_other", "pay_1")

        response = self.client.post(
            self.verify_url,
            {
                "order_id": str(self.order.id),
                "gateway_order_ref": "gw_other",
                "payment_id": "pay_1",
                "signature": signature,
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "payment_reference_mismatch")
        self.order.refresh_from_db()
        other.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PENDING)
        self.assertEqual(other.payment_status, Order.PAYMENT_PENDING)
