from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventEmitter:
    """
    Synchronous observer registry.

    - Listeners run in the emitting call, in no guaranteed order.
    - A listener that raises is logged; remaining listeners still run and the error
      does not reach the emitter's caller.
    """

    def __init__(self, *event_names: str) -> None:
        self._listeners: dict[str, list[Listener]] = {name: [] for name in event_names}

    @property
    def event_names(self) -> tuple[str, ...]:
        return tuple(self._listeners)

    def subscribe(self, event: str, listener: Listener) -> Callable[[], None]:
        """
        Register `listener` and return a callable that unsubscribes it.
        """
        self._bucket(event).append(listener)
        return lambda: self.unsubscribe(event, listener)

    def unsubscribe(self, event: str, listener: Listener) -> None:
        bucket = self._bucket(event)
        if listener in bucket:
            bucket.remove(listener)

    def emit(self, event: str, *args: Any) -> None:
        # Copy so handlers may (un)subscribe while being notified.
        for listener in list(self._bucket(event)):
            try:
                listener(*args)
            except Exception:
                logger.exception("Listener for %r failed", event)

    def _bucket(self, event: str) -> list[Listener]:
        try:
            return self._listeners[event]
        except KeyError:
            raise ValueError(
                f"Unknown event {event!r}; expected one of {sorted(self._listeners)}"
            ) from None
