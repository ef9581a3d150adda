"""
Dependency Injection Container
================================

Simple service locator for infrastructure adapters and the domain services
built on top of them.

Usage:
    from infrastructure.container import container

    order_service = container.order_service()
    payment = container.payment()
"""

import logging
from typing import Optional

from .email import EmailFactory, EmailServiceInterface
from .events import EventBus, get_event_bus
from .geocoding import GeocoderFactory, GeocoderInterface
from .notifications import NotificationFactory, OrderNotifierInterface, SmsSenderInterface
from .payments import PaymentFactory, PaymentProviderInterface


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for infrastructure dependencies.

    Implements lazy initialization and caching of service instances.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize container (only once)."""
        if not self._initialized:
            self._clear()
            self._initialized = True
            logger.info("Service container initialized")

    def _clear(self):
        # Infrastructure
        self._email: Optional[EmailServiceInterface] = None
        self._sms: Optional[SmsSenderInterface] = None
        self._notifier: Optional[OrderNotifierInterface] = None
        self._payment: Optional[PaymentProviderInterface] = None
        self._geocoder: Optional[GeocoderInterface] = None
        self._event_bus: Optional[EventBus] = None

        # Domain Services
        self._inventory_service = None
        self._pricing_service = None
        self._cart_service = None
        self._catalog_service = None
        self._order_service = None
        self._payment_service = None
        self._shop_service = None
        self._feedback_service = None
        self._support_service = None
        self._account_service = None

    def email(self, backend: Optional[str] = None) -> EmailServiceInterface:
        if self._email is None or backend is not None:
            self._email = EmailFactory.create(backend)
            logger.debug(f"Created email service: {type(self._email).__name__}")
        return self._email

    def sms(self, backend: Optional[str] = None) -> SmsSenderInterface:
        if self._sms is None or backend is not None:
            self._sms = NotificationFactory.create_sms_sender(backend)
            logger.debug(f"Created SMS sender: {type(self._sms).__name__}")
        return self._sms

    def notifier(self) -> OrderNotifierInterface:
        if self._notifier is None:
            self._notifier = NotificationFactory.create_order_notifier(
                email_service=self.email(), sms_sender=self.sms()
            )
        return self._notifier

    def payment(self, backend: Optional[str] = None) -> PaymentProviderInterface:
        if self._payment is None or backend is not None:
            self._payment = PaymentFactory.create(backend)
            logger.debug(f"Created payment service: {type(self._payment).__name__}")
        return self._payment

    def geocoder(self, backend: Optional[str] = None) -> GeocoderInterface:
        if self._geocoder is None or backend is not None:
            self._geocoder = GeocoderFactory.create(backend)
            logger.debug(f"Created geocoder: {type(self._geocoder).__name__}")
        return self._geocoder

    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            self._event_bus = get_event_bus()
        return self._event_bus

    def inventory_service(self):
        """Get InventoryService instance."""
        if self._inventory_service is None:
            from marketplace.services import InventoryService

            self._inventory_service = InventoryService()
            logger.debug("Created InventoryService")
        return self._inventory_service

    def pricing_service(self):
        """Get PricingService instance."""
        if self._pricing_service is None:
            from marketplace.services import PricingService

            self._pricing_service = PricingService()
            logger.debug("Created PricingService")
        return self._pricing_service

    def cart_service(self):
        """Get CartService instance."""
        if self._cart_service is None:
            from marketplace.services import CartService

            self._cart_service = CartService(pricing_service=self.pricing_service())
            logger.debug("Created CartService")
        return self._cart_service

    def catalog_service(self):
        """Get CatalogService instance."""
        if self._catalog_service is None:
            from marketplace.services import CatalogService

            self._catalog_service = CatalogService()
            logger.debug("Created CatalogService")
        return self._catalog_service

    def order_service(self):
        """Get OrderService instance."""
        if self._order_service is None:
            from marketplace.services import OrderService

            self._order_service = OrderService(
                cart_service=self.cart_service(),
                inventory_service=self.inventory_service(),
                pricing_service=self.pricing_service(),
                notifier=self.notifier(),
                event_bus=self.event_bus(),
            )
            logger.debug("Created OrderService")
        return self._order_service

    def payment_service(self):
        """Get PaymentService instance."""
        if self._payment_service is None:
            from marketplace.services import PaymentService

            self._payment_service = PaymentService(
                order_service=self.order_service(), payment_provider=self.payment()
            )
            logger.debug("Created PaymentService")
        return self._payment_service

    def shop_service(self):
        """Get ShopProximityService instance."""
        if self._shop_service is None:
            from marketplace.services import ShopProximityService

            self._shop_service = ShopProximityService()
            logger.debug("Created ShopProximityService")
        return self._shop_service

    def feedback_service(self):
        """Get FeedbackService instance."""
        if self._feedback_service is None:
            from marketplace.services import FeedbackService

            self._feedback_service = FeedbackService()
            logger.debug("Created FeedbackService")
        return self._feedback_service

    def support_service(self):
        """Get SupportService instance."""
        if self._support_service is None:
            from marketplace.services import SupportService

            self._support_service = SupportService()
            logger.debug("Created SupportService")
        return self._support_service

    def account_service(self):
        """Get AccountService instance."""
        if self._account_service is None:
            from authentication.domain.services import AccountService

            self._account_service = AccountService(geocoder=self.geocoder())
            logger.debug("Created AccountService")
        return self._account_service

    def reset(self):
        """
        Reset all cached service instances.

        Useful for testing or when switching between environments.
        """
        self._clear()
        logger.info("Service container reset")


# Global singleton instance
container = ServiceContainer()

