"""evented - a queryable, filterable event emitter with small stdlib helpers."""

from evented.errors import EventedError
from evented.informer import DispatchContext
from evented.informer import Informer

__all__ = ["DispatchContext", "EventedError", "Informer", "__version__"]
__version__ = "0.1.0"
