"""Status observer abstraction with protocol-based swappable implementations.

``notify`` reports progress through a ``StatusObserver``.  Callers pick the
implementation: ``InMemoryStatusObserver`` records events for inspection (the
relay router returns them to its client), ``LoggingStatusObserver`` forwards
them to structlog, and ``CallbackStatusObserver`` wraps a plain function.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

import structlog

from dispatch_relay.schemas.dispatch import StatusEvent, StatusPhase


class StatusObserver(Protocol):
    """Protocol for receiving dispatch status events."""

    def on_status(self, event: StatusEvent) -> None:
        """Handle one status event."""
        ...


class InMemoryStatusObserver:
    """Records every event it receives, in order."""

    def __init__(self) -> None:
        self.events: list[StatusEvent] = []

    def on_status(self, event: StatusEvent) -> None:
        self.events.append(event)

    @property
    def phases(self) -> list[StatusPhase]:
        return [event.phase for event in self.events]


class CallbackStatusObserver:
    """Adapts a plain ``callable(event)`` to the observer protocol."""

    def __init__(self, callback: Callable[[StatusEvent], None]) -> None:
        self._callback = callback

    def on_status(self, event: StatusEvent) -> None:
        self._callback(event)


class LoggingStatusObserver:
    """Emits each event as a structlog ``dispatch_status`` record.

    The log level follows the phase: warnings and errors are logged at their
    own level, everything else at info.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger or structlog.get_logger()

    def on_status(self, event: StatusEvent) -> None:
        if event.phase is StatusPhase.ERROR:
            log = self._logger.error
        elif event.phase is StatusPhase.WARNING:
            log = self._logger.warning
        else:
            log = self._logger.info
        log(
            "dispatch_status",
            phase=event.phase.value,
            message=event.message,
            http_status=event.http_status,
        )


class CompositeStatusObserver:
    """Fans each event out to several observers, in order."""

    def __init__(self, *observers: StatusObserver) -> None:
        self._observers = observers

    def on_status(self, event: StatusEvent) -> None:
        for observer in self._observers:
            observer.on_status(event)
