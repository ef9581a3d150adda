"""
Notification Factory
====================

Factory pattern for creating SMS senders and the order notifier.
"""

import logging
from typing import Literal, Optional

from django.conf import settings

from infrastructure.email import EmailFactory, EmailServiceInterface

from .interface import SmsSenderInterface
from .mock_service import MockSmsSender
from .order_notifier import OrderNotifier
from .twilio_service import TwilioSmsSender


logger = logging.getLogger(__name__)

SmsBackend = Literal["twilio", "mock"]


class NotificationFactory:
    """
    Usage:
        # In settings.py
        INFRASTRUCTURE = {"SMS_BACKEND_TYPE": "twilio"}  # or 'mock'

        notifier = NotificationFactory.create_order_notifier()
    """

    @staticmethod
    def create_sms_sender(backend: SmsBackend | None = None) -> SmsSenderInterface:
        infrastructure = getattr(settings, "INFRASTRUCTURE", {})
        backend_type = backend or infrastructure.get("SMS_BACKEND_TYPE", "twilio")

        logger.info(f"Creating SMS backend: {backend_type}")

        if backend_type == "twilio":
            return TwilioSmsSender()
        elif backend_type == "mock":
            return MockSmsSender()
        else:
            raise ValueError(f"Invalid SMS backend: {backend_type}. Must be 'twilio' or 'mock'")

    @staticmethod
    def create_order_notifier(
        email_service: Optional[EmailServiceInterface] = None,
        sms_sender: Optional[SmsSenderInterface] = None,
    ) -> OrderNotifier:
        return OrderNotifier(
            email_service=email_service or EmailFactory.create(),
            sms_sender=sms_sender or NotificationFactory.create_sms_sender(),
        )
