"""
Order Notifier
==============

Sends order confirmation and delivery messages over email and SMS.

Notifications are fire-and-forget: a failing channel is logged and reported
in the returned NotificationReport, and never raised to the caller.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from infrastructure.email import EmailMessage, EmailServiceInterface

from .interface import (
    NotificationContact,
    NotificationLine,
    NotificationReport,
    OrderNotifierInterface,
    SmsSenderInterface,
)


logger = logging.getLogger(__name__)


class OrderNotifier(OrderNotifierInterface):
    def __init__(self, email_service: EmailServiceInterface, sms_sender: SmsSenderInterface):
        self.email_service = email_service
        self.sms_sender = sms_sender

    def send_order_confirmation(
        self,
        contact: NotificationContact,
        order_number: str,
        items: List[NotificationLine],
        total: Decimal,
    ) -> NotificationReport:
        lines = "\n".join(f"- {item.name} x {item.quantity}: {item.line_total}" for item in items)
        body = (
            f"Hi {contact.name or 'there'},\n\n"
            f"Thank you for your order! Your order number is {order_number}.\n\n"
            f"Order details:\n{lines}\n\nTotal: {total}\n\n"
            "We'll notify you when your order is on its way."
        )
        return self._dispatch(
            contact,
            subject=f"Order Confirmation - {order_number}",
            email_body=body,
            sms_body=(
                f"Your LiveMart order {order_number} has been confirmed. "
                "We'll keep you updated on the delivery status."
            ),
        )

    def send_delivery_notification(
        self, contact: NotificationContact, order_number: str, tracking_number: Optional[str] = None
    ) -> NotificationReport:
        tracking = f"\nTracking number: {tracking_number}\n" if tracking_number else ""
        body = (
            f"Hi {contact.name or 'there'},\n\n"
            f"Your order {order_number} has been delivered.\n{tracking}\n"
            "Thank you for shopping with LiveMart!"
        )
        return self._dispatch(
            contact,
            subject=f"Your Order {order_number} Has Been Delivered",
            email_body=body,
            sms_body=f"Your LiveMart order {order_number} has been delivered. Thank you for shopping with us!",
        )

    def _dispatch(
        self, contact: NotificationContact, subject: str, email_body: str, sms_body: str
    ) -> NotificationReport:
        report = NotificationReport()

        if contact.email:
            try:
                report.email_sent = self.email_service.send(
                    EmailMessage(subject=subject, body=email_body, to=[contact.email])
                )
            except Exception as e:
                logger.error(f"Email notification '{subject}' to {contact.email} failed: {e}")
                report.errors["email"] = str(e)

        if contact.phone:
            try:
                report.sms_sent = self.sms_sender.send(contact.phone, sms_body)
            except Exception as e:
                logger.error(f"SMS notification '{subject}' to {contact.phone} failed: {e}")
                report.errors["sms"] = str(e)

        return report
