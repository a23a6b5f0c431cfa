"""
Emission Layer - Getting stable scene changes to the consumer.

Architecture:
    tracker change -> EmissionGate -> ScenePayload -> Notifier -> consumer

The gate decides WHAT is sent (the full current scene); the notifier
decides WHETHER it can be sent (consumer reachable) and HOW.
"""

from .payload import ScenePayload, BROADCAST_ACTION
from .notifier import (
    Notifier,
    CallbackNotifier,
    RecordingNotifier,
    DeliveryOutcome,
    fired_notice,
    unavailable_notice,
)
from .gate import EmissionGate

__all__ = [
    "ScenePayload",
    "BROADCAST_ACTION",
    "Notifier",
    "CallbackNotifier",
    "RecordingNotifier",
    "DeliveryOutcome",
    "fired_notice",
    "unavailable_notice",
    "EmissionGate",
]
