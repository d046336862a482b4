"""Type descriptors and the key-subset filter rule.

An event type is either a plain string or a filter mapping. A filter may
carry a ``"type"`` key naming the event type; without one (or with a
non-string one) the type name is the empty string, meaning "any type".
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from typing import Callable
from typing import Union

from evented.errors import EventTypeError
from evented.utils.compare import MISSING
from evented.utils.compare import loose_equals

EventType = Union[str, Mapping[str, Any]]
Listener = Callable[..., Any]


@dataclass(frozen=True, eq=False)
class ListenerEntry:
    """A registered listener and the filter it was registered with (None for simple ones)."""

    listener: Listener
    filter: Mapping[str, Any] | None = None

    @property
    def original(self) -> Listener:
        """The user supplied function, looking through once/after wrappers."""
        return getattr(self.listener, "listener", None) or self.listener

    def is_for(self, listener: Listener) -> bool:
        return self.listener is listener or getattr(self.listener, "listener", None) is listener


def normalize_type(type_: EventType) -> tuple[str, Mapping[str, Any] | None]:
    """Split an event type into ``(type_name, filter)``.

    Raises:
        EventTypeError: If ``type_`` is neither a string nor a mapping.
    """
    if isinstance(type_, str):
        return type_, None
    if isinstance(type_, Mapping):
        type_name = type_.get("type")
        return (type_name if isinstance(type_name, str) else ""), type_
    raise EventTypeError(type_)


def filter_matches(pattern: Mapping[str, Any], candidate: Mapping[str, Any]) -> bool:
    """True if every key of ``pattern`` loosely equals the same key of ``candidate``.

    Keys ``candidate`` has on top of those are ignored.
    """
    for key, expected in pattern.items():
        if not loose_equals(expected, candidate.get(key, MISSING)):
            return False
    return True
