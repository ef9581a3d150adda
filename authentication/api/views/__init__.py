from .account_views import AccountDeleteView, LocationView, ProfileView, RegisterAPIView


__all__ = [
    "RegisterAPIView",
    "ProfileView",
    "LocationView",
    "AccountDeleteView",
]
