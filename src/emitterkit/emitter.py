from __future__ import annotations

import logging
from threading import RLock
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Set, Tuple

from .errors import ListenerErrors, ListenerLimitExceeded, UnknownEvent
from .types import Listener

if TYPE_CHECKING:  # pragma: no cover - import only for annotations
    from .config import EmitterConfig

logger = logging.getLogger(__name__)


def _describe(listener: Any) -> str:
    if isinstance(listener, _OnceWrapper):
        return f"once({_describe(listener.listener)})"
    return getattr(listener, "__name__", repr(listener))


class _OnceWrapper:
    """Callable stored in place of a ``once`` listener.

    Calls the wrapped listener at most one time and then unregisters itself
    from the emitter, even when the listener raises.
    """

    __slots__ = ("emitter", "event", "listener", "fired")

    def __init__(self, emitter: "EventEmitter", event: str, listener: Listener) -> None:
        self.emitter = emitter
        self.event = event
        self.listener = listener
        self.fired = False

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        with self.emitter._lock:
            if self.fired:
                return None
            self.fired = True
        try:
            return self.listener(*args, **kwargs)
        finally:
            self.emitter._remove_entry(self.event, self)

    def __repr__(self) -> str:
        return f"<{_describe(self)} on {self.event!r}>"


class EventEmitter:
    """Synchronous, thread-safe registry of listeners keyed by event name.

    Listeners are called in registration order (prepends go to the front).
    ``event_names`` is advisory: any string may be used as an event name.

    Args:
        event_names: Declared event names, kept for introspection only.
        max_listeners: Maximum listeners per event, ``None`` for unbounded.
        enforce_limit: Raise :class:`ListenerLimitExceeded` instead of logging
            a warning when an event is already at ``max_listeners``.
        collect_errors: Keep calling listeners after one raises and raise a
            single :class:`ListenerErrors` at the end of the emission.
        strict_emit: Raise :class:`UnknownEvent` when emitting an event that
            has no listeners instead of returning False.
    """

    def __init__(
        self,
        event_names: Iterable[str] = (),
        max_listeners: Optional[int] = None,
        enforce_limit: bool = False,
        *,
        collect_errors: bool = False,
        strict_emit: bool = False,
    ) -> None:
        if max_listeners is not None and (
            isinstance(max_listeners, bool) or not isinstance(max_listeners, int) or max_listeners < 1
        ):
            raise ValueError(f"max_listeners must be a positive integer or None, got {max_listeners!r}")
        self.event_names: Tuple[str, ...] = tuple(event_names)
        self.max_listeners: Optional[int] = max_listeners
        self.enforce_limit = bool(enforce_limit)
        self.collect_errors = bool(collect_errors)
        self.strict_emit = bool(strict_emit)
        self._listeners: Dict[str, List[Listener]] = {}
        self._warned: Set[str] = set()
        self._lock = RLock()

    @classmethod
    def from_config(cls, config: "EmitterConfig") -> "EventEmitter":
        """Build an emitter from an :class:`emitterkit.config.EmitterConfig`."""
        return cls(
            config.event_names,
            config.max_listeners,
            config.enforce_limit,
            collect_errors=config.collect_errors,
            strict_emit=config.strict_emit,
        )

    def __repr__(self) -> str:
        with self._lock:
            counts = {event: len(entries) for event, entries in self._listeners.items()}
        return f"{type(self).__name__}(max_listeners={self.max_listeners!r}, listeners={counts!r})"

    # ------------------------ Inspection ------------------------
    def has_listeners(self, event: str) -> bool:
        with self._lock:
            return bool(self._listeners.get(event))

    def listener_count(self, event: str) -> int:
        with self._lock:
            return len(self._listeners.get(event, ()))

    def listeners(self, event: str) -> List[Listener]:
        """Return a copy of the listeners of ``event`` in call order.

        Pending ``once`` listeners are reported as the callable that was
        originally registered.
        """
        with self._lock:
            entries = list(self._listeners.get(event, ()))
        return [entry.listener if isinstance(entry, _OnceWrapper) else entry for entry in entries]

    def raw_listeners(self, event: str) -> List[Listener]:
        """Return a copy of the stored listeners, ``once`` wrappers included."""
        with self._lock:
            return list(self._listeners.get(event, ()))

    def active_events(self) -> Tuple[str, ...]:
        """Names of the events that currently have at least one listener."""
        with self._lock:
            return tuple(self._listeners)

    def check_listeners_limit(self, event: str) -> bool:
        """Return True when ``event`` already holds ``max_listeners`` listeners.

        Raises:
            ListenerLimitExceeded: If the limit is reached and ``enforce_limit`` is set.
        """
        if self.max_listeners is None:
            return False
        at_limit = self.listener_count(event) >= self.max_listeners
        if not at_limit:
            return False
        if self.enforce_limit:
            raise ListenerLimitExceeded(event, self.max_listeners)
        return True

    # ------------------------ Registration ------------------------
    def add_listener(self, event: str, listener: Listener) -> "EventEmitter":
        self._insert(event, listener, prepend=False)
        return self

    def prepend_listener(self, event: str, listener: Listener) -> "EventEmitter":
        """Add ``listener`` in front of every listener already registered for ``event``."""
        self._insert(event, listener, prepend=True)
        return self

    def once(self, event: str, listener: Listener) -> "EventEmitter":
        """Add a listener that unregisters itself after its first call."""
        self._check_callable(listener)
        self._insert(event, _OnceWrapper(self, event, listener), prepend=False)
        return self

    def prepend_once_listener(self, event: str, listener: Listener) -> "EventEmitter":
        self._check_callable(listener)
        self._insert(event, _OnceWrapper(self, event, listener), prepend=True)
        return self

    def on(self, event: str, listener: Listener) -> "EventEmitter":
        return self.add_listener(event, listener)

    # ------------------------ Removal ------------------------
    def remove_listener(self, event: str, listener: Listener) -> "EventEmitter":
        """Remove the first registration of ``listener`` for ``event``.

        A pending ``once`` registration is matched by the callable that was
        originally passed to :meth:`once`. Unknown listeners are ignored.
        """
        with self._lock:
            entries = self._listeners.get(event)
            if not entries:
                return self
            for index, entry in enumerate(entries):
                if entry == listener or (isinstance(entry, _OnceWrapper) and entry.listener == listener):
                    del entries[index]
                    self._forget_if_empty(event)
                    logger.debug("Removed listener %s from event '%s'", _describe(entry), event)
                    break
        return self

    def off(self, event: str, listener: Listener) -> "EventEmitter":
        return self.remove_listener(event, listener)

    def remove_all_listeners(self, event: Optional[str] = None) -> "EventEmitter":
        """Remove every listener of ``event``, or of all events when omitted."""
        with self._lock:
            if event is None:
                self._listeners.clear()
                self._warned.clear()
                logger.debug("Removed all listeners")
            else:
                self._listeners.pop(event, None)
                self._warned.discard(event)
                logger.debug("Removed all listeners from event '%s'", event)
        return self

    # ------------------------ Emission ------------------------
    def emit(self, event: str, *args: Any, **kwargs: Any) -> bool:
        """Call every listener of ``event`` with ``args`` and ``kwargs``.

        The listeners to call are fixed when the emission starts; changes made
        by listeners apply to later emissions. Return values are ignored.

        Returns:
            Whether ``event`` still has listeners once all of them ran.

        Raises:
            UnknownEvent: If nothing listens to ``event`` and ``strict_emit`` is set.
            ListenerErrors: If ``collect_errors`` is set and any listener raised.
        """
        with self._lock:
            entries = list(self._listeners.get(event, ()))
        if not entries:
            if self.strict_emit:
                raise UnknownEvent(event)
            logger.debug("Emitting '%s' with no listeners", event)
            return False

        logger.debug("Emitting '%s' to %d listeners", event, len(entries))
        if not self.collect_errors:
            for entry in entries:
                entry(*args, **kwargs)
            return self.has_listeners(event)

        errors: List[Tuple[Listener, BaseException]] = []
        for entry in entries:
            try:
                entry(*args, **kwargs)
            except Exception as exc:  # noqa: BLE001 - collected and re-raised below
                logger.exception("Error in listener %s for event '%s'", _describe(entry), event)
                errors.append((entry.listener if isinstance(entry, _OnceWrapper) else entry, exc))
        if errors:
            raise ListenerErrors(event, errors)
        return self.has_listeners(event)

    # ------------------------ Internals ------------------------
    @staticmethod
    def _check_callable(listener: Any) -> None:
        if not callable(listener):
            raise TypeError(f"listener must be callable, got {type(listener).__name__}")

    def _insert(self, event: str, listener: Listener, *, prepend: bool) -> None:
        self._check_callable(listener)
        with self._lock:
            if self.check_listeners_limit(event) and event not in self._warned:
                self._warned.add(event)
                logger.warning(
                    "Event '%s' has %d listeners, reaching max_listeners=%d; possible listener leak",
                    event,
                    self.listener_count(event),
                    self.max_listeners,
                )
            entries = self._listeners.setdefault(event, [])
            if prepend:
                entries.insert(0, listener)
            else:
                entries.append(listener)
        logger.debug(
            "%s listener %s to event '%s'", "Prepended" if prepend else "Added", _describe(listener), event
        )

    def _remove_entry(self, event: str, entry: Listener) -> None:
        # Identity match so a once wrapper never removes an equal-looking sibling.
        with self._lock:
            entries = self._listeners.get(event)
            if not entries:
                return
            for index, candidate in enumerate(entries):
                if candidate is entry:
                    del entries[index]
                    self._forget_if_empty(event)
                    break

    def _forget_if_empty(self, event: str) -> None:
        if not self._listeners.get(event):
            self._listeners.pop(event, None)
            self._warned.discard(event)


__all__ = ["EventEmitter"]
