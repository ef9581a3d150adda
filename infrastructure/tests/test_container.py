"""
Service Container Tests
========================

Unit tests for dependency injection container.
"""

from django.test import TestCase

from authentication.domain.services import AccountService
from infrastructure.container import ServiceContainer, container
from infrastructure.email import EmailServiceInterface, MockEmailService
from infrastructure.events import InMemoryEventBus
from infrastructure.geocoding import MockGeocoder, NominatimGeocoder
from infrastructure.notifications import MockSmsSender, OrderNotifier
from infrastructure.payments import MockPaymentProvider, PaymentProviderInterface, StripeProvider
from marketplace.services import OrderService, PaymentService, ShopProximityService


class ServiceContainerTest(TestCase):
    """Test ServiceContainer implementation."""

    def setUp(self):
        """Set up test fixtures."""
        container.reset()

    def test_container_is_singleton(self):
        """Test that ServiceContainer is a singleton."""
        container1 = ServiceContainer()
        container2 = ServiceContainer()

        self.assertIs(container1, container2)
        self.assertIs(container1, container)

    def test_get_email_service(self):
        """Test settings-driven email backend is cached."""
        email = container.email()

        self.assertIsInstance(email, EmailServiceInterface)
        self.assertIsInstance(email, MockEmailService)
        self.assertIs(email, container.email())

    def test_get_payment_service(self):
        """Test settings-driven payment provider is cached."""
        payment = container.payment()

        self.assertIsInstance(payment, PaymentProviderInterface)
        self.assertIsInstance(payment, MockPaymentProvider)
        self.assertIs(payment, container.payment())

    def test_explicit_backends(self):
        """Test explicit backend overrides settings."""
        self.assertIsInstance(container.payment("stripe"), StripeProvider)
        self.assertIsInstance(container.geocoder("nominatim"), NominatimGeocoder)
        self.assertIsInstance(container.sms("mock"), MockSmsSender)

    def test_invalid_backend(self):
        """Test unknown backends are rejected."""
        with self.assertRaises(ValueError):
            container.geocoder("google")

    def test_notifier_shares_channels(self):
        """The order notifier sends through the container's email and SMS backends."""
        notifier = container.notifier()

        self.assertIsInstance(notifier, OrderNotifier)
        self.assertIs(notifier.email_service, container.email())
        self.assertIs(notifier.sms_sender, container.sms())

    def test_domain_services_are_wired(self):
        """Test domain services receive the container's collaborators."""
        order_service = container.order_service()
        payment_service = container.payment_service()
        account_service = container.account_service()

        self.assertIsInstance(order_service, OrderService)
        self.assertIs(order_service.notifier, container.notifier())
        self.assertIsInstance(order_service.event_bus, InMemoryEventBus)
        self.assertIs(order_service.cart_service, container.cart_service())
        self.assertIs(order_service.inventory_service, container.inventory_service())

        self.assertIsInstance(payment_service, PaymentService)
        self.assertIs(payment_service.order_service, order_service)
        self.assertIs(payment_service.payment_provider, container.payment())

        self.assertIsInstance(account_service, AccountService)
        self.assertIsInstance(account_service.geocoder, MockGeocoder)

        self.assertIsInstance(container.shop_service(), ShopProximityService)

    def test_reset_container(self):
        """Test resetting container clears cached instances."""
        email1 = container.email()
        order_service1 = container.order_service()

        container.reset()

        self.assertIsNot(email1, container.email())
        self.assertIsNot(order_service1, container.order_service())
