# tests/unit/test_events.py
from __future__ import annotations

import logging

from src.core.events import GALLERY_CHANGED, EventDispatcher, field_topic


def test_publish_delivers_in_subscription_order() -> None:
    bus = EventDispatcher()
    seen: list[tuple[str, object]] = []
    bus.subscribe("field:cep", lambda v: seen.append(("first", v)))
    bus.subscribe("field:cep", lambda v: seen.append(("second", v)))

    assert bus.publish("field:cep", "88350000") == 2
    assert seen == [("first", "88350000"), ("second", "88350000")]


def test_cancel_stops_delivery_and_is_idempotent() -> None:
    bus = EventDispatcher()
    seen: list[object] = []
    sub = bus.subscribe(GALLERY_CHANGED, seen.append)

    sub.cancel()
    sub.cancel()

    assert not sub.active
    assert bus.publish(GALLERY_CHANGED, ()) == 0
    assert seen == []


def test_failing_subscriber_is_logged_and_others_still_run(caplog) -> None:
    bus = EventDispatcher()
    seen: list[object] = []

    def boom(_):
        raise RuntimeError("subscriber bug")

    bus.subscribe("t", boom)
    bus.subscribe("t", seen.append)

    with caplog.at_level(logging.ERROR, logger="src.core.events"):
        assert bus.publish("t", 1) == 1
    assert seen == [1]
    assert "Subscriber for 't' failed" in caplog.text


def test_subscriber_may_cancel_itself_during_publish() -> None:
    bus = EventDispatcher()
    calls: list[int] = []
    holder = {}

    def once(v):
        calls.append(v)
        holder["sub"].cancel()

    holder["sub"] = bus.subscribe("t", once)
    bus.publish("t", 1)
    bus.publish("t", 2)
    assert calls == [1]
    assert bus.subscriber_count("t") == 0


def test_field_topic_naming() -> None:
    assert field_topic("city") == "field:city"
