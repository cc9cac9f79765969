"""
Subscriptions and event delivery.

Disposable is the handle returned for every subscription. EventEmitter
delivers an event to all current listeners independently: one listener
failing is logged and never stops the others, and a listener disposed
before delivery is skipped.

Disposing a subscription only prevents future deliveries. Work a listener
already started keeps running.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[T], "Awaitable[None] | None"]


class Disposable:
    """
    Handle that releases a resource once.

    Example:
        handle = Disposable(lambda: listeners.remove(callback))
        handle.dispose()
        handle.dispose()  # no-op
    """

    def __init__(self, on_dispose: Callable[[], Any] | None = None):
        self._on_dispose = on_dispose
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        if self._on_dispose is not None:
            self._on_dispose()
            self._on_dispose = None

    @classmethod
    def from_many(cls, disposables: Iterable[Disposable]) -> Disposable:
        """Combine handles into one that disposes them in reverse order."""
        items = list(disposables)

        def dispose_all() -> None:
            for item in reversed(items):
                item.dispose()

        return cls(dispose_all)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(disposed={self._disposed})"


class _Subscription(Disposable, Generic[T]):
    def __init__(self, emitter: EventEmitter[T], listener: Listener[T]):
        super().__init__(lambda: emitter._remove(self))
        self.listener = listener


class EventEmitter(Generic[T]):
    """
    Async-aware event source.

    Listeners may be plain callables or coroutine functions.

    Usage:
        changed = EventEmitter[AppConfig]()
        handle = changed.subscribe(on_change)
        await changed.fire(config)
        handle.dispose()
    """

    def __init__(self) -> None:
        self._subscriptions: list[_Subscription[T]] = []

    def subscribe(self, listener: Listener[T]) -> Disposable:
        subscription = _Subscription(self, listener)
        self._subscriptions.append(subscription)
        return subscription

    @property
    def listener_count(self) -> int:
        return len(self._subscriptions)

    def _remove(self, subscription: _Subscription[T]) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    async def fire(self, event: T) -> None:
        """Deliver an event to every listener and wait until all finished."""
        subscriptions = list(self._subscriptions)
        if not subscriptions:
            return
        results = await asyncio.gather(
            *(self._deliver(subscription, event) for subscription in subscriptions),
            return_exceptions=True,
        )
        for subscription, result in zip(subscriptions, results):
            if isinstance(result, Exception):
                logger.error(
                    f"Listener {subscription.listener!r} failed: {result}",
                    exc_info=result,
                )

    async def _deliver(self, subscription: _Subscription[T], event: T) -> None:
        if subscription.disposed:
            return
        result = subscription.listener(event)
        if inspect.isawaitable(result):
            await result

    def dispose(self) -> None:
        for subscription in list(self._subscriptions):
            subscription.dispose()
