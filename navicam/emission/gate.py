"""
Emission Gate - Packages tracker changes into combined payloads.

Either tracker may report a change. The gate always sends the current
value of BOTH fields, so a text-only change still carries the current
objects and vice versa.
"""

from __future__ import annotations
import logging
import threading
from typing import Iterable

from ..analysis.results import TextSnapshot
from .notifier import DeliveryOutcome, Notifier
from .payload import ScenePayload

logger = logging.getLogger(__name__)


class EmissionGate:
    """
    Holds the latest stable scene and forwards it to the notifier.

    Deliveries are serialized, so two changes from the same frame are
    delivered one after the other, each payload complete. Stored state
    has its own lock, so a transport may read `current_payload()`
    while a delivery is in progress.
    """

    def __init__(self, notifier: Notifier):
        self.notifier = notifier
        self._delivery_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._objects: frozenset[str] = frozenset()
        self._text: TextSnapshot = TextSnapshot()
        self.emission_count = 0

    def current_payload(self) -> ScenePayload:
        with self._state_lock:
            return self._build()

    def objects_changed(self, stable_set: Iterable[str]) -> DeliveryOutcome:
        with self._delivery_lock:
            with self._state_lock:
                self._objects = frozenset(stable_set)
                payload = self._build()
            return self._deliver(payload)

    def text_changed(self, snapshot: TextSnapshot) -> DeliveryOutcome:
        with self._delivery_lock:
            with self._state_lock:
                self._text = snapshot
                payload = self._build()
            return self._deliver(payload)

    def emit_empty(self) -> DeliveryOutcome:
        """Tell the consumer the scene is gone, leaving stored state alone."""
        with self._delivery_lock:
            return self._deliver(ScenePayload())

    def _build(self) -> ScenePayload:
        return ScenePayload.build(self._objects, self._text.blocks)

    def _deliver(self, payload: ScenePayload) -> DeliveryOutcome:
        self.emission_count += 1
        outcome = self.notifier.deliver(payload)
        logger.info(
            "Emission %d: %d objects, %d text blocks -> %s",
            self.emission_count,
            len(payload.object_list),
            len(payload.text_blocks),
            outcome.value,
        )
        return outcome
