"""
Geocoding Service Interface
============================

Abstract base class for turning a free-form address into coordinates.
Used when a seller registers or changes their shop address.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Coordinates:
    """
    A WGS84 point.

    Attributes:
        lat: Latitude in decimal degrees
        lng: Longitude in decimal degrees
    """

    lat: float
    lng: float


class GeocoderInterface(ABC):
    """
    Abstract interface for geocoding.

    Concrete implementations:
        - NominatimGeocoder: OpenStreetMap Nominatim search API
        - MockGeocoder: In-memory lookup table for tests
    """

    @abstractmethod
    def geocode(self, address: str) -> Optional[Coordinates]:
        """
        Resolve an address to coordinates.

        Args:
            address: Single-line address

        Returns:
            Coordinates of the best match, or None if nothing matched

        Raises:
            GeocodingException: If the provider could not be reached
        """
        pass


class GeocodingException(Exception):
    """Base exception for geocoding operations."""

    pass
