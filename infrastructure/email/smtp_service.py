"""
SMTP Email Service
==================

EmailServiceInterface backed by Django's email machinery, so any backend
configured through EMAIL_BACKEND (SMTP, SES, console) works unchanged.
"""

import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives

from .interface import EmailException, EmailMessage, EmailServiceInterface


logger = logging.getLogger(__name__)


class SMTPEmailService(EmailServiceInterface):
    """
    Django email service implementation.

    Configuration (in settings.py):
        EMAIL_BACKEND, EMAIL_HOST, EMAIL_PORT, EMAIL_HOST_USER,
        EMAIL_HOST_PASSWORD, EMAIL_USE_TLS, DEFAULT_FROM_EMAIL
    """

    def __init__(self):
        self.default_from = getattr(settings, "DEFAULT_FROM_EMAIL", "noreply@livemart.local")

    def send(self, message: EmailMessage) -> bool:
        try:
            email = EmailMultiAlternatives(
                subject=message.subject,
                body=message.body,
                from_email=message.from_email or self.default_from,
                to=message.to,
                cc=message.cc,
            )
            if message.html_body:
                email.attach_alternative(message.html_body, "text/html")

            sent = email.send(fail_silently=False) > 0
            if sent:
                logger.info(f"Email sent to {message.to}: {message.subject}")
            else:
                logger.warning(f"Email backend accepted nothing for {message.to}")
            return sent

        except Exception as e:
            logger.error(f"Failed to send email to {message.to}: {str(e)}")
            raise EmailException(f"Email send failed: {str(e)}") from e
