"""
Email Service Interface
========================

Abstract base class defining the contract for transactional email.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class EmailMessage:
    """
    Represents an email message.

    Attributes:
        subject: Email subject line
        body: Plain-text body
        to: Recipient addresses
        from_email: Sender address (uses DEFAULT_FROM_EMAIL if None)
        html_body: Optional HTML alternative
    """

    subject: str
    body: str
    to: List[str]
    from_email: Optional[str] = None
    html_body: Optional[str] = None
    cc: List[str] = field(default_factory=list)


class EmailServiceInterface(ABC):
    """
    Abstract interface for email operations.

    Concrete implementations:
        - SMTPEmailService: Django's configured email backend
        - MockEmailService: Records messages in memory
    """

    @abstractmethod
    def send(self, message: EmailMessage) -> bool:
        """
        Send a single email message.

        Returns:
            True if the backend accepted the message

        Raises:
            EmailException: If the backend rejected the message
        """
        pass


class EmailException(Exception):
    """Base exception for email operations."""

    pass
