from __future__ import annotations

from typing import Any, List, Tuple


class EmitterError(Exception):
    """Base class for errors raised by the event emitter."""


class ListenerLimitExceeded(EmitterError):
    """Raised when registering a listener would exceed ``max_listeners`` for an event."""

    def __init__(self, event: str, limit: int) -> None:
        super().__init__(f"Maximum event listeners ({limit}) for {event!r} event!")
        self.event = event
        self.limit = limit


class UnknownEvent(EmitterError, KeyError):
    """Raised by a strict emitter when emitting an event nobody listens to."""

    def __init__(self, event: str) -> None:
        super().__init__(event)
        self.event = event

    def __str__(self) -> str:
        return f"No listeners registered for {self.event!r} event"


class ListenerErrors(EmitterError):
    """Failures collected from listeners during a single emission.

    Only raised by emitters configured with ``collect_errors=True``; every
    listener has already been invoked by the time this is raised.
    """

    def __init__(self, event: str, errors: List[Tuple[Any, BaseException]]) -> None:
        super().__init__(f"{len(errors)} listener(s) failed for {event!r} event")
        self.event = event
        self.errors = errors
