"""
Twilio SMS Sender
=================

SmsSenderInterface implemented against the Twilio Messages REST endpoint.
"""

import logging
from typing import Optional

import requests
from django.conf import settings
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .interface import NotificationException, SmsSenderInterface


logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class TwilioSmsSender(SmsSenderInterface):
    """
    Twilio SMS implementation.

    Configuration (in settings.py):
        TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_FROM_NUMBER, SMS_REQUEST_TIMEOUT
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.account_sid = getattr(settings, "TWILIO_ACCOUNT_SID", "")
        self.auth_token = getattr(settings, "TWILIO_AUTH_TOKEN", "")
        self.from_number = getattr(settings, "TWILIO_FROM_NUMBER", "")
        self.timeout = getattr(settings, "SMS_REQUEST_TIMEOUT", 10)
        self.session = session or requests.Session()

        if not self.account_sid:
            logger.warning("TWILIO_ACCOUNT_SID not configured")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        reraise=True,
    )
    def _create_message_api(self, to: str, body: str) -> requests.Response:
        return self.session.post(
            f"{TWILIO_API_BASE}/Accounts/{self.account_sid}/Messages.json",
            data={"To": to, "From": self.from_number, "Body": body},
            auth=(self.account_sid, self.auth_token),
            timeout=self.timeout,
        )

    def send(self, to: str, body: str) -> bool:
        try:
            response = self._create_message_api(to, body)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to send SMS to {to}: {str(e)}")
            raise NotificationException(f"SMS send failed: {str(e)}") from e

        logger.info(f"SMS sent to {to}")
        return True
