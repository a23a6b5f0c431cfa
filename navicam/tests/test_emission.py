"""
Tests for the emission gate and notifiers.

Tests:
- Combined payloads (both fields on every emission)
- Consumer availability checked per delivery
- User notices
- Serialized delivery
"""

import logging
import threading
import time

from ..analysis import TextSnapshot
from ..emission import (
    BROADCAST_ACTION,
    CallbackNotifier,
    DeliveryOutcome,
    EmissionGate,
    RecordingNotifier,
    ScenePayload,
)
from ..emission.notifier import fired_notice, unavailable_notice


class TestScenePayload:
    """Payload shape handed to the consumer."""

    def test_to_dict(self):
        payload = ScenePayload.build({"cup", "book"}, ["hello", "world"])

        assert payload.to_dict() == {
            "action": BROADCAST_ACTION,
            "objectList": ["book", "cup"],
            "textBlocks": ["hello", "world"],
            "text": "hello\nworld",
        }

    def test_empty(self):
        payload = ScenePayload()

        assert payload.is_empty()
        assert payload.text == ""
        assert payload.to_dict()["objectList"] == []


class TestEmissionGate:
    """Gate combines the latest stable value of both trackers."""

    def test_object_change_carries_current_text(self, gate, notifier):
        gate.text_changed(TextSnapshot.from_blocks(["menu"]))
        gate.objects_changed({"cup"})

        assert notifier.sent[-1] == ScenePayload(object_list=("cup",), text_blocks=("menu",))

    def test_text_change_carries_current_objects(self, gate, notifier):
        gate.objects_changed({"cup", "book"})
        gate.text_changed(TextSnapshot.from_blocks(["hello"]))

        last = notifier.sent[-1]
        assert last.object_list == ("book", "cup")
        assert last.text_blocks == ("hello",)

    def test_one_payload_per_change(self, gate, notifier):
        gate.objects_changed({"cup"})
        gate.text_changed(TextSnapshot.from_blocks(["a"]))
        gate.objects_changed(set())

        assert len(notifier.sent) == 3
        assert gate.emission_count == 3
        assert notifier.sent[-1] == ScenePayload(object_list=(), text_blocks=("a",))

    def test_emit_empty_keeps_state(self, gate, notifier):
        gate.objects_changed({"cup"})

        outcome = gate.emit_empty()

        assert outcome == DeliveryOutcome.DELIVERED
        assert notifier.sent[-1].is_empty()
        assert gate.current_payload().object_list == ("cup",)

    def test_deliveries_do_not_overlap(self):
        """Concurrent changes are delivered one at a time."""
        active = []
        overlaps = []

        class SlowNotifier(RecordingNotifier):
            def send(self, payload):
                active.append(payload)
                if len(active) > 1:
                    overlaps.append(payload)
                time.sleep(0.01)
                super().send(payload)
                active.remove(payload)

        notifier = SlowNotifier()
        gate = EmissionGate(notifier)
        threads = [
            threading.Thread(target=gate.objects_changed, args=({"cup"},)),
            threading.Thread(target=gate.text_changed, args=(TextSnapshot.from_blocks(["hi"]),)),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert overlaps == []
        assert len(notifier.sent) == 2
        assert notifier.sent[-1] == ScenePayload(object_list=("cup",), text_blocks=("hi",))

    def test_transport_can_read_current_scene(self):
        """A transport that reads the gate during delivery sees the new scene."""
        seen = []

        def transport(payload):
            seen.append(gate.current_payload())

        gate = EmissionGate(CallbackNotifier(
            consumer_check=lambda: True,
            transport=transport,
            user_notice=lambda message: seen.append(gate.current_payload()),
        ))
        worker = threading.Thread(target=gate.objects_changed, args=({"cup"},), daemon=True)
        worker.start()
        worker.join(timeout=2)

        assert not worker.is_alive()
        assert seen == [ScenePayload(object_list=("cup",))] * 2


class TestConsumerAvailability:
    """Missing consumer is an outcome, not an error."""

    def test_delivered_notice(self, gate, notifier):
        outcome = gate.objects_changed({"cup", "book"})

        assert outcome == DeliveryOutcome.DELIVERED
        assert notifier.notices == ["Broadcast is Fired: Object List Size: 2, Text String Length: 0"]

    def test_unavailable_consumer(self, gate, notifier):
        notifier.consumer_available = False

        outcome = gate.objects_changed({"cup"})

        assert outcome == DeliveryOutcome.CONSUMER_UNAVAILABLE
        assert notifier.sent == []
        assert notifier.notices == ["Companion App: smartnotes Not Found"]

    def test_state_updates_without_consumer(self, gate, notifier):
        notifier.consumer_available = False
        gate.objects_changed({"cup"})

        notifier.consumer_available = True
        gate.text_changed(TextSnapshot.from_blocks(["hi"]))

        assert notifier.sent == [ScenePayload(object_list=("cup",), text_blocks=("hi",))]

    def test_checked_on_every_delivery(self, gate, notifier):
        gate.objects_changed({"cup"})
        gate.objects_changed({"cup", "book"})
        gate.emit_empty()

        assert notifier.checks == 3


class TestNotices:
    """User-facing notice text."""

    def test_fired_notice_counts_text_length(self):
        payload = ScenePayload.build(["cup"], ["ab", "cd"])

        assert fired_notice(payload) == (
            "Broadcast is Fired: Object List Size: 1, Text String Length: 5"
        )

    def test_unavailable_notice_names_consumer(self):
        assert unavailable_notice("notes") == "Companion App: notes Not Found"


class TestCallbackNotifier:
    """Notifier assembled from callables."""

    def test_uses_callables(self):
        sent = []
        notices = []
        notifier = CallbackNotifier(
            consumer_check=lambda: True,
            transport=sent.append,
            user_notice=notices.append,
        )

        outcome = notifier.deliver(ScenePayload.build(["cup"], []))

        assert outcome == DeliveryOutcome.DELIVERED
        assert sent == [ScenePayload(object_list=("cup",))]
        assert notices == ["Broadcast is Fired: Object List Size: 1, Text String Length: 0"]

    def test_default_notice_is_logged(self, caplog):
        sent = []
        notifier = CallbackNotifier(
            consumer_check=lambda: False,
            transport=sent.append,
            consumer_name="notes",
        )

        with caplog.at_level(logging.INFO, logger="navicam.emission.notifier"):
            outcome = notifier.deliver(ScenePayload())

        assert outcome == DeliveryOutcome.CONSUMER_UNAVAILABLE
        assert sent == []
        assert "Companion App: notes Not Found" in caplog.text
