"""
ServerEvents - listener lifecycle notifications.

A narrow observer: interested parties subscribe callbacks to ``listen``,
``close``, ``connection`` or ``error``. The dispatcher never uses it.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List
import inspect
import logging


logger = logging.getLogger("switchyard.server.events")

EVENTS = ("listen", "close", "connection", "error")

Listener = Callable[..., Any]


class ServerEvents:
    """Subscribe to and emit server lifecycle events."""

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {name: [] for name in EVENTS}

    def _check(self, event: str) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown server event '{event}'. Expected one of: {', '.join(EVENTS)}")

    def subscribe(self, event: str, callback: Listener) -> Callable[[], None]:
        """Register ``callback`` for ``event``. Returns an unsubscribe function."""
        self._check(event)
        self._listeners[event].append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners[event]:
                self._listeners[event].remove(callback)

        return unsubscribe

    async def emit(self, event: str, *args: Any) -> None:
        """
        Notify every listener of ``event``.

        A failing listener is logged and does not stop the others.
        """
        self._check(event)
        for callback in list(self._listeners[event]):
            try:
                result = callback(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning(f"Listener for '{event}' failed: {e}", exc_info=True)
