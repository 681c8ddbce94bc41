"""
Notification adapters tests.
"""

import json
import logging
from datetime import datetime

from src.core.entities.events import ApplicationStatusChanged, CarrierActivated, event_to_dict
from src.infrastructure.notifications.composite_notifier import CompositeNotifier
from src.infrastructure.notifications.logging_notifier import LoggingNotifier
from src.infrastructure.notifications.memory_notifier import InMemoryNotifier

EVENT = ApplicationStatusChanged(
    application_id="a1",
    carrier_id="c1",
    from_status="pending",
    to_status="approved",
    actor_id="admin-1",
    occurred_at=datetime(2026, 3, 1, 10, 0, 0),
)


class ExplodingNotifier:
    def publish(self, event):
        raise RuntimeError("broker down")


class TestNotifiers:

    def test_event_to_dict(self):
        data = event_to_dict(EVENT)
        assert data["kind"] == "application_status_changed"
        assert data["to_status"] == "approved"
        assert data["occurred_at"] == "2026-03-01T10:00:00"

    def test_memory_notifier_filters_by_kind(self):
        notifier = InMemoryNotifier()
        notifier.publish(EVENT)
        notifier.publish(CarrierActivated(carrier_id="c1", application_id="a1", occurred_at=EVENT.occurred_at))
        assert len(notifier.events) == 2
        assert notifier.of_kind("carrier_activated")[0].carrier_id == "c1"
        notifier.clear()
        assert notifier.events == []

    def test_logging_notifier_emits_json_line(self, caplog):
        with caplog.at_level(logging.INFO, logger="carrier_verification.events"):
            LoggingNotifier().publish(EVENT)
        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["application_id"] == "a1"

    def test_composite_isolates_failing_subscriber(self):
        memory = InMemoryNotifier()
        composite = CompositeNotifier([ExplodingNotifier(), memory])
        composite.publish(EVENT)
        assert memory.events == [EVENT]

    def test_subscribe(self):
        composite = CompositeNotifier([])
        memory = InMemoryNotifier()
        composite.subscribe(memory)
        composite.publish(EVENT)
        assert memory.events == [EVENT]
