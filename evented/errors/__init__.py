"""Error handling for evented."""

from evented.errors.evented_errors import CombinedListenerError
from evented.errors.evented_errors import ConfigurationError
from evented.errors.evented_errors import EventedError
from evented.errors.evented_errors import EventTypeError
from evented.errors.evented_errors import ListenerError
from evented.errors.evented_errors import ListenerTypeError
from evented.errors.evented_errors import UnhandledErrorEvent
from evented.errors.evented_errors import as_exception

__all__ = [
    "CombinedListenerError",
    "ConfigurationError",
    "EventTypeError",
    "EventedError",
    "ListenerError",
    "ListenerTypeError",
    "UnhandledErrorEvent",
    "as_exception",
]
