"""
Geocoding Abstraction Layer
===========================

Address to coordinates resolution used to populate shop locations.
"""

from .factory import GeocoderFactory
from .interface import Coordinates, GeocoderInterface, GeocodingException
from .mock_service import MockGeocoder
from .nominatim_service import NominatimGeocoder


__all__ = [
    "Coordinates",
    "GeocoderInterface",
    "GeocodingException",
    "NominatimGeocoder",
    "MockGeocoder",
    "GeocoderFactory",
]
