"""
EventBus — topic → listener fan-out for realtime updates.

Pure in-process primitive with no network dependencies. All access happens
on the event loop thread, so no locking is needed.
"""
from __future__ import annotations

import logging
from typing import Any, Callable

_LOGGER = logging.getLogger(__name__)

Listener = Callable[[Any], None]

_MISSING = object()


class EventBus:
    """
    Delivers each emitted payload to the topic's listeners in registration
    order. A listener that raises is logged and skipped; the others still
    receive the payload.
    """

    def __init__(self) -> None:
        # topic → listeners; dict keys keep insertion order and reject duplicates
        self._listeners: dict[str, dict[Listener, None]] = {}
        # topic → last emitted payload
        self._latest: dict[str, Any] = {}

    def subscribe(self, topic: str, listener: Listener, replay: bool = False) -> Callable[[], None]:
        """
        Register listener for topic and return a function that unregisters it.

        With replay=True the last payload emitted on the topic (if any) is
        delivered to the new listener immediately; otherwise it only sees
        future emissions.
        """
        self._listeners.setdefault(topic, {})[listener] = None

        if replay:
            latest = self._latest.get(topic, _MISSING)
            if latest is not _MISSING:
                self._deliver(topic, listener, latest)

        def unsubscribe() -> None:
            listeners = self._listeners.get(topic)
            if listeners is not None:
                listeners.pop(listener, None)

        return unsubscribe

    def emit(self, topic: str, payload: Any) -> None:
        """Deliver payload to every listener of topic."""
        self._latest[topic] = payload
        # Copy so listeners may unsubscribe while being called
        for listener in list(self._listeners.get(topic, ())):
            self._deliver(topic, listener, payload)

    def latest(self, topic: str, default: Any = None) -> Any:
        return self._latest.get(topic, default)

    def listener_count(self, topic: str) -> int:
        return len(self._listeners.get(topic, ()))

    def clear(self) -> None:
        """Drop every listener and cached payload."""
        self._listeners.clear()
        self._latest.clear()

    @staticmethod
    def _deliver(topic: str, listener: Listener, payload: Any) -> None:
        try:
            listener(payload)
        except Exception:  # noqa: BLE001
            _LOGGER.exception("Error in %s subscriber", topic)
