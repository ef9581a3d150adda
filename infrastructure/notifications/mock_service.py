"""
Mock SMS Sender
===============

Records text messages in memory instead of sending them.
"""

import logging
from typing import List, Tuple

from .interface import SmsSenderInterface


logger = logging.getLogger(__name__)


class MockSmsSender(SmsSenderInterface):
    def __init__(self):
        self.sent_messages: List[Tuple[str, str]] = []

    def send(self, to: str, body: str) -> bool:
        logger.info(f"[MOCK SMS] To: {to}, Body: {body[:100]}")
        self.sent_messages.append((to, body))
        return True
