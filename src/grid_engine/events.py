"""Minimal event bus used for "notify downstream" signalling."""

from __future__ import annotations

from typing import Callable, Dict, List

Listener = Callable[[object], None]


class EventBus:
    """Synchronous pub/sub; listeners run in subscription order."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Listener]] = {}

    def subscribe(self, event: str, callback: Listener) -> Callable[[], None]:
        """Register ``callback``; the returned function unsubscribes it."""

        listeners = self._subscribers.setdefault(event, [])
        listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in listeners:
                listeners.remove(callback)

        return _unsubscribe

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)

    def has_listeners(self, event: str) -> bool:
        return bool(self._subscribers.get(event))


__all__ = ["EventBus", "Listener"]
