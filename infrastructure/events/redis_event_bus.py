import json
import logging
import threading
from typing import Callable, Optional

import redis
from django.conf import settings
from django.utils import timezone

from .event_bus_interface import EventBus
from .memory_event_bus import InMemoryEventBus


logger = logging.getLogger(__name__)


class RedisEventBus(EventBus):
    """Redis pub/sub implementation of event bus."""

    def __init__(self, redis_url: Optional[str] = None):
        self.redis_url = redis_url or getattr(settings, "REDIS_URL", "redis://localhost:6379/0")

        try:
            self.redis_client = redis.from_url(self.redis_url)
        except Exception as e:
            logger.error(f"Failed to configure Redis at {self.redis_url}: {e}")
            self.redis_client = None

        self._subscribers = {}
        self._listening = False

    def publish(self, event_type: str, payload: dict):
        """Publish event to Redis channel."""
        if not self.redis_client:
            logger.warning(f"Redis client not available. Event {event_type} dropped.")
            return

        try:
            message = {"event_type": event_type, "occurred_at": timezone.now().isoformat(), "payload": payload}
            self.redis_client.publish(f"events.{event_type}", json.dumps(message))
            logger.info(f"Published event: {event_type}")
        except Exception as e:
            # Publishing must not break business logic
            logger.error(f"Failed to publish event {event_type}: {str(e)}")

    def subscribe(self, event_type: str, handler: Callable):
        """Subscribe to event channel."""
        self._subscribers.setdefault(event_type, []).append(handler)
        logger.info(f"Registered handler for event: {event_type}")

    def start_listening(self):
        """Start listening to subscribed channels (background thread)."""
        if self._listening or not self.redis_client:
            return
        self._listening = True

        def listen():
            try:
                pubsub = self.redis_client.pubsub()
                channels = [f"events.{et}" for et in self._subscribers.keys()]

                if not channels:
                    self._listening = False
                    return

                pubsub.subscribe(*channels)
                logger.info(f"EventBus listening on: {channels}")

                for message in pubsub.listen():
                    if message["type"] == "message":
                        self._handle_message(message)
            except Exception as e:
                logger.error(f"EventBus listener crashed: {e}")
                self._listening = False

        thread = threading.Thread(target=listen, daemon=True)
        thread.start()

    def _handle_message(self, message):
        """Dispatch the full envelope (event_type, occurred_at, payload) to handlers."""
        try:
            data = json.loads(message["data"])
            event_type = data["event_type"]

            for handler in self._subscribers.get(event_type, []):
                try:
                    handler(data)
                except Exception as e:
                    logger.error(f"Handler error for {event_type}: {str(e)}")
        except Exception as e:
            logger.error(f"Failed to process message: {str(e)}")


# Singleton instance
_event_bus_instance: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Get singleton event bus instance for the configured backend."""
    global _event_bus_instance
    if _event_bus_instance is None:
        backend = getattr(settings, "INFRASTRUCTURE", {}).get("EVENT_BUS_BACKEND", "redis")
        if backend == "memory":
            _event_bus_instance = InMemoryEventBus()
        else:
            _event_bus_instance = RedisEventBus()
    return _event_bus_instance


def reset_event_bus() -> None:
    global _event_bus_instance
    _event_bus_instance = None
