"""Typed publish/subscribe channels with scoped subscriptions."""
from __future__ import annotations

from typing import Callable, Generic, List, Optional, TypeVar

from armory.engine.logger import ChannelLogger, default_channel

T = TypeVar("T")


class Subscription:
    """Handle returned by :meth:`Signal.subscribe`; releasing it is idempotent."""

    def __init__(self, signal: "Signal", callback: Callable) -> None:
        self._signal: Optional[Signal] = signal
        self._callback = callback

    @property
    def active(self) -> bool:
        return self._signal is not None

    def release(self) -> None:
        if self._signal is None:
            return
        self._signal._remove(self._callback)
        self._signal = None


class Signal(Generic[T]):
    """A synchronous channel carrying one payload type.

    Subscribers run in registration order and ``publish`` returns only once
    all of them have returned. A subscriber that raises is logged and the
    remaining subscribers still run.
    """

    def __init__(self, name: str, logger: Optional[ChannelLogger] = None) -> None:
        self.name = name
        self._callbacks: List[Callable[[T], None]] = []
        self._logger = logger or default_channel("signals")

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        self._callbacks.append(callback)
        return Subscription(self, callback)

    def publish(self, payload: T) -> None:
        for callback in list(self._callbacks):
            try:
                callback(payload)
            except Exception:
                self._logger.exception("Error in subscriber for %s", self.name)

    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def _remove(self, callback: Callable[[T], None]) -> None:
        try:
            self._callbacks.remove(callback)
        except ValueError:
            pass


class SubscriptionScope:
    """Owns a group of subscriptions released together by :meth:`close`."""

    def __init__(self) -> None:
        self._subscriptions: List[Subscription] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, signal: Signal[T], callback: Callable[[T], None]) -> Subscription:
        if self._closed:
            raise RuntimeError("Cannot subscribe through a closed scope")
        subscription = signal.subscribe(callback)
        self._subscriptions.append(subscription)
        return subscription

    def close(self) -> None:
        for subscription in reversed(self._subscriptions):
            subscription.release()
        self._subscriptions.clear()
        self._closed = True

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __enter__(self) -> "SubscriptionScope":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


__all__ = ["Signal", "Subscription", "SubscriptionScope"]
