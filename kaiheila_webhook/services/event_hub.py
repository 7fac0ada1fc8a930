"""Delivery of admitted packets and decrypt errors to consumers.

Subscribe before the server starts listening and unsubscribe on shutdown;
packets arriving while nobody is subscribed are acknowledged and dropped.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class WebhookSubscriber(Protocol):
    async def on_message(self, packet: dict) -> None: ...

    async def on_error(self, error: Exception) -> None: ...


@dataclass(frozen=True)
class WebhookEvent:
    kind: str  # "message" or "error"
    packet: dict | None = None
    error: Exception | None = None


class EventHub:
    def __init__(self):
        self._subscribers: list[WebhookSubscriber] = []
        self._pending: set[asyncio.Task] = set()

    def subscribe(self, subscriber: WebhookSubscriber) -> Callable[[], None]:
        self._subscribers.append(subscriber)

        def unsubscribe():
            self.unsubscribe(subscriber)

        return unsubscribe

    def unsubscribe(self, subscriber: WebhookSubscriber):
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def dispatch_message(self, packet: dict) -> asyncio.Task:
        """Deliver in the background so the acknowledgment never waits on subscribers."""
        return self._track(self.publish_message(packet))

    def dispatch_error(self, error: Exception) -> asyncio.Task:
        return self._track(self.publish_error(error))

    def _track(self, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @property
    def pending_deliveries(self) -> int:
        return len(self._pending)

    async def drain(self):
        """Wait for every delivery dispatched so far."""
        while self._pending:
            await asyncio.gather(*self._pending)

    async def publish_message(self, packet: dict):
        for subscriber in list(self._subscribers):
            try:
                await subscriber.on_message(packet)
            except Exception:
                logger.exception("Subscriber %r failed on message sn=%s", subscriber, packet.get("sn"))

    async def publish_error(self, error: Exception):
        for subscriber in list(self._subscribers):
            try:
                await subscriber.on_error(error)
            except Exception:
                logger.exception("Subscriber %r failed on error notification", subscriber)


class QueueSubscriber:
    """Buffers events on an ``asyncio.Queue`` for consumers that poll."""

    def __init__(self, maxsize: int = 0):
        self.queue: asyncio.Queue[WebhookEvent] = asyncio.Queue(maxsize=maxsize)

    async def on_message(self, packet: dict) -> None:
        await self.queue.put(WebhookEvent(kind="message", packet=packet))

    async def on_error(self, error: Exception) -> None:
        await self.queue.put(WebhookEvent(kind="error", error=error))

    async def get(self) -> WebhookEvent:
        return await self.queue.get()


class LoggingSubscriber:
    async def on_message(self, packet: dict) -> None:
        payload = packet.get("d") or {}
        logger.info(
            "Webhook event sn=%s type=%s channel_type=%s",
            packet.get("sn"),
            payload.get("type"),
            payload.get("channel_type"),
        )

    async def on_error(self, error: Exception) -> None:
        logger.warning("Webhook decrypt error: %s", error)
