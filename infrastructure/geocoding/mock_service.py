"""
Mock Geocoder
=============

Lookup-table geocoder for tests and offline development.
"""

import logging
from typing import Dict, List, Optional

from .interface import Coordinates, GeocoderInterface


logger = logging.getLogger(__name__)


class MockGeocoder(GeocoderInterface):
    """
    Resolves addresses from an in-memory table.

    Unknown addresses resolve to None. Every lookup is recorded in
    ``queries`` for verification.
    """

    def __init__(self, known: Optional[Dict[str, Coordinates]] = None):
        self.known: Dict[str, Coordinates] = dict(known or {})
        self.queries: List[str] = []

    def register(self, address: str, lat: float, lng: float) -> None:
        self.known[address] = Coordinates(lat=lat, lng=lng)

    def geocode(self, address: str) -> Optional[Coordinates]:
        self.queries.append(address)
        result = self.known.get(address)
        logger.info(f"[MOCK GEOCODER] '{address}' -> {result}")
        return result
