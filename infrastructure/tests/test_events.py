"""
Event Bus Tests
===============

Unit tests for the in-memory and Redis event buses.
"""

import json
from unittest.mock import MagicMock, patch

from django.test import TestCase, override_settings

from infrastructure.events import InMemoryEventBus, RedisEventBus, get_event_bus, reset_event_bus


class InMemoryEventBusTest(TestCase):
    def setUp(self):
        self.bus = InMemoryEventBus()

    def test_publish_records_envelope_and_calls_handlers(self):
        received = []
        self.bus.subscribe("order.placed", received.append)

        self.bus.publish("order.placed", {"order_id": "o1"})

        self.assertEqual(len(received), 1)
        self.assertEqual(received[0]["event_type"], "order.placed")
        self.assertEqual(received[0]["payload"], {"order_id": "o1"})
        self.assertIn("occurred_at", received[0])
        self.assertEqual(self.bus.published, received)

    def test_failing_handler_does_not_stop_others(self):
        received = []
        self.bus.subscribe("order.placed", MagicMock(side_effect=RuntimeError("boom")))
        self.bus.subscribe("order.placed", received.append)

        self.bus.publish("order.placed", {})

        self.assertEqual(len(received), 1)


class RedisEventBusTest(TestCase):
    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_publish_to_channel(self, mock_from_url):
        client = mock_from_url.return_value
        bus = RedisEventBus("redis://test:6379/0")

        bus.publish("payment.paid", {"order_id": "o1"})

        channel, raw = client.publish.call_args.args
        self.assertEqual(channel, "events.payment.paid")
        self.assertEqual(json.loads(raw)["payload"], {"order_id": "o1"})

    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_publish_failure_is_swallowed(self, mock_from_url):
        mock_from_url.return_value.publish.side_effect = ConnectionError("down")
        bus = RedisEventBus("redis://test:6379/0")

        bus.publish("payment.paid", {})

    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_incoming_message_dispatched(self, mock_from_url):
        bus = RedisEventBus("redis://test:6379/0")
        handler = MagicMock()
        bus.subscribe("order.placed", handler)
        envelope = {"event_type": "order.placed", "occurred_at": "now", "payload": {"order_id": "o1"}}

        bus._handle_message({"type": "message", "data": json.dumps(envelope)})

        handler.assert_called_once_with(envelope)

    @patch("infrastructure.events.redis_event_bus.threading.Thread")
    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_start_listening_spawns_one_daemon_thread(self, mock_from_url, mock_thread):
        bus = RedisEventBus("redis://test:6379/0")
        bus.subscribe("order.placed", MagicMock())

        bus.start_listening()
        bus.start_listening()

        mock_thread.assert_called_once()
        self.assertTrue(mock_thread.call_args.kwargs["daemon"])
        mock_thread.return_value.start.assert_called_once_with()

    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_listener_thread_dispatches_published_messages(self, mock_from_url):
        envelope = {"event_type": "order.placed", "occurred_at": "now", "payload": {"order_id": "o1"}}
        pubsub = mock_from_url.return_value.pubsub.return_value
        pubsub.listen.return_value = iter(
            [{"type": "subscribe", "data": 1}, {"type": "message", "data": json.dumps(envelope)}]
        )
        bus = RedisEventBus("redis://test:6379/0")
        handler = MagicMock()
        bus.subscribe("order.placed", handler)

        with patch("infrastructure.events.redis_event_bus.threading.Thread") as mock_thread:
            bus.start_listening()
            target = mock_thread.call_args.kwargs["target"]
        target()

        pubsub.subscribe.assert_called_once_with("events.order.placed")
        handler.assert_called_once_with(envelope)


class GetEventBusTest(TestCase):
    def tearDown(self):
        reset_event_bus()

    def test_memory_backend_singleton(self):
        reset_event_bus()

        bus = get_event_bus()

        self.assertIsInstance(bus, InMemoryEventBus)
        self.assertIs(bus, get_event_bus())

    @override_settings(INFRASTRUCTURE={"EVENT_BUS_BACKEND": "redis"})
    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_redis_backend(self, mock_from_url):
        reset_event_bus()

        self.assertIsInstance(get_event_bus(), RedisEventBus)
