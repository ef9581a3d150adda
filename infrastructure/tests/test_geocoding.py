"""
Geocoding Infrastructure Tests
===============================

Unit tests for the geocoder abstraction layer.
"""

from unittest.mock import MagicMock

import requests
from django.test import TestCase, override_settings

from infrastructure.geocoding import (
    Coordinates,
    GeocoderFactory,
    GeocoderInterface,
    GeocodingException,
    MockGeocoder,
    NominatimGeocoder,
)


class GeocoderInterfaceTest(TestCase):
    def test_interface_is_abstract(self):
        with self.assertRaises(TypeError):
            GeocoderInterface()


@override_settings(GEOCODING_BASE_URL="https://geo.test/", GEOCODING_USER_AGENT="LiveMartTests/1.0")
class NominatimGeocoderTest(TestCase):
    """Test NominatimGeocoder against a stubbed HTTP session."""

    def setUp(self):
        self.session = MagicMock()
        self.geocoder = NominatimGeocoder(session=self.session)

    def respond_with(self, payload):
        response = MagicMock()
        response.json.return_value = payload
        self.session.get.return_value = response
        return response

    def test_best_match(self):
        self.respond_with([{"lat": "18.5204", "lon": "73.8567"}, {"lat": "0", "lon": "0"}])

        coordinates = self.geocoder.geocode("12 MG Road, Pune")

        self.assertEqual(coordinates, Coordinates(lat=18.5204, lng=73.8567))
        args, kwargs = self.session.get.call_args
        self.assertEqual(args[0], "https://geo.test/search")
        self.assertEqual(kwargs["params"]["q"], "12 MG Road, Pune")
        self.assertEqual(kwargs["headers"]["User-Agent"], "LiveMartTests/1.0")

    def test_no_match(self):
        self.respond_with([])

        self.assertIsNone(self.geocoder.geocode("Nowhere"))

    def test_blank_address_skips_request(self):
        self.assertIsNone(self.geocoder.geocode("   "))
        self.session.get.assert_not_called()

    def test_http_error_raises(self):
        response = self.respond_with([])
        response.raise_for_status.side_effect = requests.HTTPError("503 Service Unavailable")

        with self.assertRaises(GeocodingException):
            self.geocoder.geocode("12 MG Road, Pune")

    def test_malformed_result_raises(self):
        self.respond_with([{"display_name": "Pune"}])

        with self.assertRaises(GeocodingException):
            self.geocoder.geocode("Pune")


class MockGeocoderTest(TestCase):
    def test_registered_addresses_resolve(self):
        geocoder = MockGeocoder()
        geocoder.register("Pune", 18.52, 73.85)

        self.assertEqual(geocoder.geocode("Pune"), Coordinates(18.52, 73.85))
        self.assertIsNone(geocoder.geocode("Atlantis"))
        self.assertEqual(geocoder.queries, ["Pune", "Atlantis"])


class GeocoderFactoryTest(TestCase):
    def test_create_from_settings(self):
        self.assertIsInstance(GeocoderFactory.create(), MockGeocoder)

    def test_create_nominatim(self):
        self.assertIsInstance(GeocoderFactory.create("nominatim"), NominatimGeocoder)

    def test_create_invalid_backend(self):
        with self.assertRaises(ValueError):
            GeocoderFactory.create("google")
