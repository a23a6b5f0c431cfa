"""
WebSocket notifier - Delivers scene payloads to connected API clients.

The consumer counts as available while at least one client is
subscribed; with nobody listening, deliveries report the consumer
as missing.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable

from ..emission.notifier import Notifier
from ..emission.payload import ScenePayload

logger = logging.getLogger(__name__)


class WebSocketNotifier(Notifier):
    """
    Fans payloads out to one queue per subscribed client.

    Must be used from the event loop that drains the queues.
    """

    def __init__(self, consumer_name: str = "smartnotes"):
        self.consumer_name = consumer_name
        self._subscribers: list[asyncio.Queue] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.append(queue)
        logger.info("Consumer subscribed (%d connected)", len(self._subscribers))
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)
            logger.info("Consumer unsubscribed (%d connected)", len(self._subscribers))

    def is_consumer_available(self) -> bool:
        return len(self._subscribers) > 0

    def send(self, payload: ScenePayload) -> None:
        message = {"type": "scene_update", "payload": payload.to_dict()}
        for queue in self._subscribers:
            queue.put_nowait(message)


async def forward_updates(queue: asyncio.Queue, send: Callable[[dict], Awaitable[None]]) -> None:
    """Send every queued update to one client until cancelled or the send fails."""
    while True:
        message = await queue.get()
        await send(message)


async def stop_forwarder(task: asyncio.Task) -> None:
    """Cancel a forwarder task and collect its result."""
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    except Exception as e:
        logger.debug("Update forwarder ended: %s", e)
