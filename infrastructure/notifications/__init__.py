"""
Notification Service Abstraction Layer
========================================

Order confirmation and delivery messages over email and SMS.
"""

from .factory import NotificationFactory
from .interface import (
    NotificationContact,
    NotificationException,
    NotificationLine,
    NotificationReport,
    OrderNotifierInterface,
    SmsSenderInterface,
)
from .mock_service import MockSmsSender
from .order_notifier import OrderNotifier
from .twilio_service import TwilioSmsSender


__all__ = [
    "NotificationContact",
    "NotificationLine",
    "NotificationReport",
    "NotificationException",
    "SmsSenderInterface",
    "OrderNotifierInterface",
    "OrderNotifier",
    "TwilioSmsSender",
    "MockSmsSender",
    "NotificationFactory",
]
