"""
Notification Service Interface
===============================

Contracts for SMS delivery and for the order notifier that combines
email and SMS into customer-facing order messages.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional


@dataclass
class NotificationContact:
    """
    Where a notification goes.

    Attributes:
        name: Recipient display name
        email: Email address (skipped when blank)
        phone: E.164 phone number (skipped when blank)
    """

    name: str = ""
    email: str = ""
    phone: str = ""


@dataclass
class NotificationLine:
    """One line of an order summary."""

    name: str
    quantity: int
    line_total: Decimal


@dataclass
class NotificationReport:
    """Per-channel outcome of a notification request."""

    email_sent: bool = False
    sms_sent: bool = False
    errors: Dict[str, str] = field(default_factory=dict)


class SmsSenderInterface(ABC):
    """
    Abstract interface for SMS delivery.

    Concrete implementations:
        - TwilioSmsSender: Twilio REST API
        - MockSmsSender: Records messages in memory
    """

    @abstractmethod
    def send(self, to: str, body: str) -> bool:
        """
        Send a text message.

        Raises:
            NotificationException: If the provider rejected the message
        """
        pass


class OrderNotifierInterface(ABC):
    """Customer-facing order notifications. Never raises."""

    @abstractmethod
    def send_order_confirmation(
        self,
        contact: NotificationContact,
        order_number: str,
        items: List[NotificationLine],
        total: Decimal,
    ) -> NotificationReport:
        pass

    @abstractmethod
    def send_delivery_notification(
        self, contact: NotificationContact, order_number: str, tracking_number: Optional[str] = None
    ) -> NotificationReport:
        pass


class NotificationException(Exception):
    """Base exception for notification operations."""

    pass
