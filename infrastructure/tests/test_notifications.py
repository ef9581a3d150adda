"""
Notification Infrastructure Tests
==================================

Unit tests for the order notifier and SMS senders.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import requests
from django.test import TestCase, override_settings

from infrastructure.email import EmailException, MockEmailService
from infrastructure.notifications import (
    MockSmsSender,
    NotificationContact,
    NotificationException,
    NotificationFactory,
    NotificationLine,
    OrderNotifier,
    TwilioSmsSender,
)


class OrderNotifierTest(TestCase):
    """Test OrderNotifier implementation."""

    def setUp(self):
        """Set up test fixtures."""
        self.email = MockEmailService()
        self.sms = MockSmsSender()
        self.notifier = OrderNotifier(email_service=self.email, sms_sender=self.sms)
        self.contact = NotificationContact(name="Asha", email="asha@example.com", phone="+919811111111")

    def test_order_confirmation_over_both_channels(self):
        report = self.notifier.send_order_confirmation(
            self.contact,
            "ORD-1700000000000-ABCDEFGHI",
            [NotificationLine("Basmati Rice", 3, Decimal("300.00"))],
            Decimal("340.00"),
        )

        self.assertTrue(report.email_sent)
        self.assertTrue(report.sms_sent)
        self.assertEqual(report.errors, {})

        message = self.email.get_last_message()
        self.assertEqual(message.to, ["asha@example.com"])
        self.assertIn("ORD-1700000000000-ABCDEFGHI", message.subject)
        self.assertIn("Basmati Rice x 3: 300.00", message.body)
        self.assertIn("Total: 340.00", message.body)

        to, body = self.sms.sent_messages[0]
        self.assertEqual(to, "+919811111111")
        self.assertIn("confirmed", body)

    def test_delivery_notification_includes_tracking(self):
        self.notifier.send_delivery_notification(self.contact, "ORD-1", "TRK123")

        self.assertIn("Tracking number: TRK123", self.email.get_last_message().body)

    def test_blank_channels_are_skipped(self):
        contact = NotificationContact(name="No Phone", email="x@example.com")

        report = self.notifier.send_delivery_notification(contact, "ORD-1")

        self.assertTrue(report.email_sent)
        self.assertFalse(report.sms_sent)
        self.assertEqual(self.sms.sent_messages, [])

    def test_failing_channel_is_reported_not_raised(self):
        failing_email = MagicMock()
        failing_email.send.side_effect = EmailException("smtp down")
        notifier = OrderNotifier(email_service=failing_email, sms_sender=self.sms)

        report = notifier.send_delivery_notification(self.contact, "ORD-1")

        self.assertFalse(report.email_sent)
        self.assertTrue(report.sms_sent)
        self.assertIn("email", report.errors)


@override_settings(TWILIO_ACCOUNT_SID="AC123", TWILIO_AUTH_TOKEN="token", TWILIO_FROM_NUMBER="+15550000000")
class TwilioSmsSenderTest(TestCase):
    """Test TwilioSmsSender implementation."""

    def setUp(self):
        self.session = MagicMock()
        self.sender = TwilioSmsSender(session=self.session)

    def test_send_posts_message(self):
        self.session.post.return_value = MagicMock(status_code=201)

        self.assertTrue(self.sender.send("+919811111111", "Hello"))

        args, kwargs = self.session.post.call_args
        self.assertTrue(args[0].endswith("/Accounts/AC123/Messages.json"))
        self.assertEqual(kwargs["data"], {"To": "+919811111111", "From": "+15550000000", "Body": "Hello"})
        self.assertEqual(kwargs["auth"], ("AC123", "token"))

    def test_rejected_message_raises(self):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("400 Bad Request")
        self.session.post.return_value = response

        with self.assertRaises(NotificationException):
            self.sender.send("+919811111111", "Hello")


class NotificationFactoryTest(TestCase):
    def test_create_sms_sender_from_settings(self):
        self.assertIsInstance(NotificationFactory.create_sms_sender(), MockSmsSender)

    def test_create_twilio(self):
        self.assertIsInstance(NotificationFactory.create_sms_sender("twilio"), TwilioSmsSender)

    def test_create_invalid_backend(self):
        with self.assertRaises(ValueError):
            NotificationFactory.create_sms_sender("fax")

    def test_create_order_notifier(self):
        notifier = NotificationFactory.create_order_notifier()

        self.assertIsInstance(notifier, OrderNotifier)
        self.assertIsInstance(notifier.email_service, MockEmailService)
        self.assertIsInstance(notifier.sms_sender, MockSmsSender)
