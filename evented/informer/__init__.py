"""The Informer event system."""

from evented.informer.context import PARALLEL
from evented.informer.context import SERIES
from evented.informer.context import DispatchContext
from evented.informer.informer import Informer
from evented.informer.matching import ListenerEntry
from evented.informer.matching import filter_matches
from evented.informer.matching import normalize_type

__all__ = [
    "PARALLEL",
    "SERIES",
    "DispatchContext",
    "Informer",
    "ListenerEntry",
    "filter_matches",
    "normalize_type",
]
