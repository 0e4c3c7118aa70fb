"""Typed signals and scoped subscriptions."""
from __future__ import annotations

import pytest

from armory.engine.signals import Signal, SubscriptionScope


def test_subscribers_run_in_registration_order() -> None:
    signal: Signal[int] = Signal("numbers")
    calls: list[str] = []
    signal.subscribe(lambda value: calls.append(f"a{value}"))
    signal.subscribe(lambda value: calls.append(f"b{value}"))
    signal.publish(1)
    assert calls == ["a1", "b1"]


def test_failing_subscriber_does_not_block_others() -> None:
    signal: Signal[int] = Signal("numbers")
    received: list[int] = []

    def broken(value: int) -> None:
        raise RuntimeError("boom")

    signal.subscribe(broken)
    signal.subscribe(received.append)
    signal.publish(3)
    assert received == [3]


def test_release_is_idempotent() -> None:
    signal: Signal[int] = Signal("numbers")
    received: list[int] = []
    subscription = signal.subscribe(received.append)
    subscription.release()
    subscription.release()
    signal.publish(1)
    assert received == []
    assert not subscription.active
    assert signal.subscriber_count() == 0


def test_scope_releases_all_subscriptions() -> None:
    first: Signal[int] = Signal("first")
    second: Signal[str] = Signal("second")
    received: list[object] = []
    with SubscriptionScope() as scope:
        scope.subscribe(first, received.append)
        scope.subscribe(second, received.append)
        assert len(scope) == 2
        first.publish(1)
    second.publish("ignored")
    assert received == [1]
    assert first.subscriber_count() == 0
    assert second.subscriber_count() == 0
    with pytest.raises(RuntimeError):
        scope.subscribe(first, received.append)


def test_subscriber_may_release_during_publish() -> None:
    signal: Signal[int] = Signal("numbers")
    received: list[int] = []
    holder = {}

    def once(value: int) -> None:
        received.append(value)
        holder["sub"].release()

    holder["sub"] = signal.subscribe(once)
    signal.publish(1)
    signal.publish(2)
    assert received == [1]
