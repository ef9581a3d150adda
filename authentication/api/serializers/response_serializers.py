"""
Response Serializers for API Documentation

These serializers define the structure of API responses for OpenAPI schema generation.
They are NOT used for data validation, only for documentation in Swagger/ReDoc.
"""

from rest_framework import serializers

from .account_serializers import UserSerializer


class ErrorResponseSerializer(serializers.Serializer):
    """Generic error response"""

    error = serializers.CharField(help_text="Error message")
    detail = serializers.CharField(required=False, help_text="Additional error details")


class RegisterResponseSerializer(serializers.Serializer):
    """Response for successful registration"""

    message = serializers.CharField(help_text="Success message")
    user = UserSerializer(help_text="Created user")
    geocoded = serializers.BooleanField(help_text="Whether shop coordinates were resolved from the address")


class LocationResponseSerializer(serializers.Serializer):
    """Response for a shop location update"""

    message = serializers.CharField(help_text="Success message")
    user = UserSerializer(help_text="Updated user")
    geocoded = serializers.BooleanField(help_text="Whether coordinates were resolved from the address")
