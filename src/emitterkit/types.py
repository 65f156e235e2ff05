from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, Tuple, TypeVar, runtime_checkable

Listener = Callable[..., Any]

E = TypeVar("E", bound="EventEmitterProtocol")


@runtime_checkable
class EventEmitterProtocol(Protocol):
    """Public surface of an event emitter.

    Collaborators that only need to subscribe or publish should depend on
    this protocol rather than on :class:`emitterkit.emitter.EventEmitter`.
    """

    event_names: Tuple[str, ...]
    max_listeners: Optional[int]

    def emit(self, event: str, *args: Any, **kwargs: Any) -> bool:
        """Call every listener of ``event`` with the given arguments."""

    def has_listeners(self, event: str) -> bool:
        ...

    def check_listeners_limit(self, event: str) -> bool:
        """Return True when ``event`` is at or over the listener limit."""

    def add_listener(self: E, event: str, listener: Listener) -> E:
        ...

    def remove_listener(self: E, event: str, listener: Listener) -> E:
        ...

    def remove_all_listeners(self: E, event: Optional[str] = None) -> E:
        """Remove the listeners of one event, or of every event when omitted."""

    def on(self: E, event: str, listener: Listener) -> E:
        ...

    def off(self: E, event: str, listener: Listener) -> E:
        ...

    def once(self: E, event: str, listener: Listener) -> E:
        """Add a listener that is removed after its first call."""

    def prepend_listener(self: E, event: str, listener: Listener) -> E:
        ...

    def prepend_once_listener(self: E, event: str, listener: Listener) -> E:
        ...

    def listeners(self, event: str) -> list:
        """Return a copy of the listeners of ``event`` in call order."""

    def listener_count(self, event: str) -> int:
        ...
