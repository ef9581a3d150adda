"""
Geocoder Factory
================

Factory pattern for creating geocoder instances based on configuration.
"""

import logging
from typing import Literal

from django.conf import settings

from .interface import GeocoderInterface
from .mock_service import MockGeocoder
from .nominatim_service import NominatimGeocoder


logger = logging.getLogger(__name__)

GeocodingBackend = Literal["nominatim", "mock"]


class GeocoderFactory:
    """
    Factory for creating geocoder instances.

    Usage:
        # In settings.py
        INFRASTRUCTURE = {"GEOCODING_BACKEND": "nominatim"}  # or 'mock'

        # In your code
        geocoder = GeocoderFactory.create()
    """

    @staticmethod
    def create(backend: GeocodingBackend | None = None) -> GeocoderInterface:
        """
        Create a geocoder instance.

        Args:
            backend: 'nominatim' or 'mock'; if None, read from settings.INFRASTRUCTURE

        Raises:
            ValueError: If backend type is invalid
        """
        infrastructure = getattr(settings, "INFRASTRUCTURE", {})
        backend_type = backend or infrastructure.get("GEOCODING_BACKEND", "nominatim")

        logger.info(f"Creating geocoder backend: {backend_type}")

        if backend_type == "nominatim":
            return NominatimGeocoder()
        elif backend_type == "mock":
            return MockGeocoder()
        else:
            raise ValueError(f"Invalid geocoding backend: {backend_type}. Must be 'nominatim' or 'mock'")
