import logging

from django.apps import AppConfig
from django.conf import settings


logger = logging.getLogger(__name__)


class MarketplaceConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "marketplace"

    def ready(self):
        from marketplace.infra.observability.tracing import setup_tracing

        setup_tracing(
            service_name=getattr(settings, "OTEL_SERVICE_NAME", "livemart-marketplace"),
            enable=getattr(settings, "OTEL_TRACING_ENABLED", False),
        )

        # Register event listeners and start the listening thread (Redis backend)
        try:
            from marketplace.infra.events.listeners import start_marketplace_event_bus

            start_marketplace_event_bus()
        except Exception as e:
            logger.error(f"Failed to initialize marketplace event bus: {e}")
