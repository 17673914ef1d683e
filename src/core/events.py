"""
Synchronous publish/subscribe used by the screen controllers.

Field watchers (CEP → address lookup, city → neighborhoods) and the gallery
change feed are plain subscriptions on a dispatcher, so they can be driven and
asserted in tests without any UI toolkit.

Topics in use:
    field:<name>      payload = new value of a form field
    gallery:changed   payload = full ordered tuple of gallery images
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

Callback = Callable[[Any], None]


@dataclass(eq=False)
class Subscription:
    """Handle returned by `EventDispatcher.subscribe`; call `cancel()` to stop receiving events."""

    topic: str
    callback: Callback
    _dispatcher: EventDispatcher | None = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        return self._dispatcher is not None

    def cancel(self) -> None:
        if self._dispatcher is not None:
            self._dispatcher._remove(self)
            self._dispatcher = None


class EventDispatcher:
    def __init__(self) -> None:
        self._subs: dict[str, list[Subscription]] = defaultdict(list)

    def subscribe(self, topic: str, callback: Callback) -> Subscription:
        sub = Subscription(topic=topic, callback=callback, _dispatcher=self)
        self._subs[topic].append(sub)
        return sub

    def publish(self, topic: str, payload: Any = None) -> int:
        """
        Deliver `payload` to every subscriber of `topic`, in subscription order.
        Returns the number of callbacks that completed without raising.
        """
        delivered = 0
        # copy: callbacks may cancel themselves or subscribe others
        for sub in list(self._subs.get(topic, ())):
            try:
                sub.callback(payload)
                delivered += 1
            except Exception:
                logger.exception("Subscriber for %r failed", topic)
        return delivered

    def subscriber_count(self, topic: str) -> int:
        return len(self._subs.get(topic, ()))

    def _remove(self, sub: Subscription) -> None:
        subs = self._subs.get(sub.topic)
        if subs and sub in subs:
            subs.remove(sub)


def field_topic(name: str) -> str:
    return f"field:{name}"


GALLERY_CHANGED = "gallery:changed"
