"""
Nominatim Geocoder
==================

Concrete implementation of GeocoderInterface using the OpenStreetMap
Nominatim search endpoint.
"""

import logging
from typing import Optional

import requests
from django.conf import settings
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .interface import Coordinates, GeocoderInterface, GeocodingException


logger = logging.getLogger(__name__)


class NominatimGeocoder(GeocoderInterface):
    """
    Nominatim geocoder.

    Configuration (in settings.py):
        GEOCODING_BASE_URL: Nominatim server root
        GEOCODING_USER_AGENT: Identifying User-Agent (required by the usage policy)
        GEOCODING_TIMEOUT: Request timeout in seconds
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.base_url = getattr(settings, "GEOCODING_BASE_URL", "https://nominatim.openstreetmap.org").rstrip("/")
        self.user_agent = getattr(settings, "GEOCODING_USER_AGENT", "LiveMart/1.0")
        self.timeout = getattr(settings, "GEOCODING_TIMEOUT", 10)
        self.session = session or requests.Session()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        reraise=True,
    )
    def _search_api(self, address: str) -> list:
        response = self.session.get(
            f"{self.base_url}/search",
            params={"q": address, "format": "jsonv2", "limit": 1},
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def geocode(self, address: str) -> Optional[Coordinates]:
        if not address or not address.strip():
            return None

        try:
            results = self._search_api(address)
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Geocoding request failed for '{address}': {e}")
            raise GeocodingException(f"Geocoding failed: {e}") from e

        if not results:
            logger.info(f"No geocoding match for '{address}'")
            return None

        best = results[0]
        try:
            coordinates = Coordinates(lat=float(best["lat"]), lng=float(best["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingException(f"Malformed geocoding response: {best}") from e

        logger.info(f"Geocoded '{address}' to ({coordinates.lat}, {coordinates.lng})")
        return coordinates
