from .account_serializers import (
    AccountDeletionSerializer,
    LocationUpdateSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserSerializer,
)


__all__ = [
    "UserSerializer",
    "RegisterSerializer",
    "ProfileUpdateSerializer",
    "LocationUpdateSerializer",
    "AccountDeletionSerializer",
]
