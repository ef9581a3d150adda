import logging

from django.conf import settings

from infrastructure.events import get_event_bus


logger = logging.getLogger(__name__)


def handle_order_placed(event_data):
    """Handle order.placed event."""
    try:
        payload = event_data.get("payload", {})
        logger.info(
            f"[Marketplace Listener] Order placed: {payload.get('order_number')} "
            f"for customer {payload.get('customer_id')}, total {payload.get('total')}"
        )
    except Exception as e:
        logger.error(f"Error handling order.placed event: {e}")


def handle_order_status_changed(event_data):
    """Handle order.status_changed event."""
    try:
        payload = event_data.get("payload", {})
        logger.info(
            f"[Marketplace Listener] Order {payload.get('order_id')} moved "
            f"{payload.get('previous_status')} -> {payload.get('status')}"
        )
    except Exception as e:
        logger.error(f"Error handling order.status_changed event: {e}")


def handle_payment_paid(event_data):
    """Handle payment.paid event."""
    try:
        payload = event_data.get("payload", {})
        logger.info(
            f"[Marketplace Listener] Payment {payload.get('payment_id')} recorded for order {payload.get('order_id')}"
        )
    except Exception as e:
        logger.error(f"Error handling payment.paid event: {e}")


def handle_payment_failed(event_data):
    """Handle payment.failed event."""
    try:
        payload = event_data.get("payload", {})
        logger.warning(f"[Marketplace Listener] Payment failed for order {payload.get('order_id')}")
    except Exception as e:
        logger.error(f"Error handling payment.failed event: {e}")


def register_marketplace_listeners(event_bus=None):
    """Register all marketplace event listeners."""
    event_bus = event_bus or get_event_bus()
    event_bus.subscribe("order.placed", handle_order_placed)
    event_bus.subscribe("order.status_changed", handle_order_status_changed)
    event_bus.subscribe("payment.paid", handle_payment_paid)
    event_bus.subscribe("payment.failed", handle_payment_failed)
    logger.info("Marketplace event listeners registered")


def start_marketplace_event_bus(event_bus=None):
    """
    Register the marketplace listeners and start delivering events to them.

    The Redis bus delivers on a background thread; test runs keep to the
    synchronous in-memory bus and never spawn it.
    """
    event_bus = event_bus or get_event_bus()
    register_marketplace_listeners(event_bus)

    if getattr(settings, "TESTING", False):
        return event_bus

    event_bus.start_listening()
    logger.info("Marketplace event bus listening")
    return event_bus
