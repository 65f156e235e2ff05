"""
emitterkit: a synchronous, typed publish/subscribe registry.

Listeners are registered against event names on an :class:`EventEmitter` and
called in order whenever the event is emitted.
"""
from .config import EmitterConfig, load_emitter_config
from .emitter import EventEmitter
from .errors import EmitterError, ListenerErrors, ListenerLimitExceeded, UnknownEvent
from .types import EventEmitterProtocol, Listener

__all__ = [
    "EventEmitter",
    "EventEmitterProtocol",
    "Listener",
    "EmitterConfig",
    "load_emitter_config",
    "EmitterError",
    "ListenerLimitExceeded",
    "ListenerErrors",
    "UnknownEvent",
]
