from __future__ import annotations

from typing import Callable, Dict

Listener = Callable[[], None]


class Subscription:
    """Handle returned by PointerEvents.subscribe(); close() is idempotent."""

    def __init__(self, bus: PointerEvents, token: int):
        self._bus = bus
        self._token = token
        self.active = True

    def close(self) -> None:
        if self.active:
            self._bus._unsubscribe(self._token)
            self.active = False

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class PointerEvents:
    """
    Process-wide pointer-up channel.

    A drag may end anywhere, not only over the component that started it, so
    pointer-up is broadcast to every subscriber rather than routed by target.
    """

    def __init__(self):
        self._listeners: Dict[int, Listener] = {}
        self._next_token = 0

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Listener) -> Subscription:
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = listener
        return Subscription(self, token)

    def _unsubscribe(self, token: int) -> None:
        self._listeners.pop(token, None)

    def pointer_up(self) -> None:
        # copy: listeners may unsubscribe while being notified
        for listener in list(self._listeners.values()):
            listener()


GLOBAL_POINTER_EVENTS = PointerEvents()
