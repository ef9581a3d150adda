"""
Business logic services for authentication.

Services encapsulate business rules and coordinate between
infrastructure (geocoding) and domain models.
"""

from .account_service import AccountService
from .results import RegisterResult, Result


__all__ = [
    "AccountService",
    "RegisterResult",
    "Result",
]
