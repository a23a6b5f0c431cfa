"""
Notifier - Delivers scene payloads to the downstream consumer.

Every delivery attempt first asks whether the consumer is reachable.
That check is a capability of the notifier, never cached:
- Consumer available: send the payload, tell the user it fired
- Consumer missing: tell the user the consumer was not found

A missing consumer is an outcome, not an error.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable
import logging

from .payload import ScenePayload

logger = logging.getLogger(__name__)


class DeliveryOutcome(Enum):
    """Result of one delivery attempt."""
    DELIVERED = "delivered"
    CONSUMER_UNAVAILABLE = "consumer_unavailable"


def fired_notice(payload: ScenePayload) -> str:
    return (
        "Broadcast is Fired: "
        f"Object List Size: {len(payload.object_list)}, "
        f"Text String Length: {len(payload.text)}"
    )


def unavailable_notice(consumer_name: str) -> str:
    return f"Companion App: {consumer_name} Not Found"


class Notifier(ABC):
    """
    Abstract base class for notifiers.

    Implementations:
    - CallbackNotifier: Injected callables for check, transport and notice
    - RecordingNotifier: Keeps everything in memory (tests, replay)
    - WebSocketNotifier: Pushes to subscribed API clients
    """

    consumer_name: str = "smartnotes"

    @abstractmethod
    def is_consumer_available(self) -> bool:
        """Check whether the consumer can receive a payload right now."""
        pass

    @abstractmethod
    def send(self, payload: ScenePayload) -> None:
        """Hand the payload to the transport."""
        pass

    def notify_user(self, message: str) -> None:
        """Show a local notice to the user."""
        logger.info(message)

    def deliver(self, payload: ScenePayload) -> DeliveryOutcome:
        """Check for the consumer, then send or report it missing."""
        if not self.is_consumer_available():
            logger.warning("Consumer %s unavailable, payload not sent", self.consumer_name)
            self.notify_user(unavailable_notice(self.consumer_name))
            return DeliveryOutcome.CONSUMER_UNAVAILABLE

        self.send(payload)
        self.notify_user(fired_notice(payload))
        return DeliveryOutcome.DELIVERED


class CallbackNotifier(Notifier):
    """
    Notifier assembled from plain callables.

    Usage:
        notifier = CallbackNotifier(
            consumer_check=lambda: registry.has("smartnotes"),
            transport=bus.publish,
        )
    """

    def __init__(
        self,
        consumer_check: Callable[[], bool],
        transport: Callable[[ScenePayload], None],
        user_notice: Callable[[str], None] | None = None,
        consumer_name: str = "smartnotes",
    ):
        self.consumer_check = consumer_check
        self.transport = transport
        self.user_notice = user_notice
        self.consumer_name = consumer_name

    def is_consumer_available(self) -> bool:
        return bool(self.consumer_check())

    def send(self, payload: ScenePayload) -> None:
        self.transport(payload)

    def notify_user(self, message: str) -> None:
        if self.user_notice is None:
            super().notify_user(message)
        else:
            self.user_notice(message)


@dataclass
class RecordingNotifier(Notifier):
    """In-memory notifier; flip `consumer_available` to simulate a missing consumer."""
    consumer_available: bool = True
    consumer_name: str = "smartnotes"

    sent: list[ScenePayload] = field(default_factory=list)
    notices: list[str] = field(default_factory=list)
    checks: int = 0

    def is_consumer_available(self) -> bool:
        self.checks += 1
        return self.consumer_available

    def send(self, payload: ScenePayload) -> None:
        self.sent.append(payload)

    def notify_user(self, message: str) -> None:
        self.notices.append(message)
