from django.urls import path

from authentication.api.views import AccountDeleteView, LocationView, ProfileView, RegisterAPIView


urlpatterns = [
    path("register/", RegisterAPIView.as_view(), name="register"),
    path("profile/", ProfileView.as_view(), name="profile"),
    path("profile/location/", LocationView.as_view(), name="profile_location"),
    path("profile/delete/", AccountDeleteView.as_view(), name="profile_delete"),
]
