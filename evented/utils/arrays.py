"""Free-standing collection helpers.

These never touch the builtin types; they take a sequence and return a new
list (``clean`` is the only one that works in place).
"""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import MutableSequence
from collections.abc import Sequence
from typing import Any
from typing import TypeVar

from evented.utils.compare import loose_equals

T = TypeVar("T")


def cast(value: Any) -> list[Any]:
    """Turn ``value`` into a list.

    Lists are returned unchanged, ``None`` becomes an empty list, other
    iterables are copied into a list. Strings, bytes and mappings count as a
    single value and get wrapped.
    """
    if isinstance(value, list):
        return value
    if value is None:
        return []
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return [value]
    if isinstance(value, Iterable):
        return list(value)
    return [value]


def _contains(haystack: Sequence[Any], needle: Any, cast_fn: Callable[[Any], Any] | None) -> bool:
    for item in haystack:
        test = cast_fn(item) if cast_fn else item
        if loose_equals(needle, test):
            return True
    return False


def shared(values: Sequence[T], other: Any, cast_fn: Callable[[Any], Any] | None = None) -> list[T]:
    """Values of ``values`` that also appear in ``other``."""
    other = other if isinstance(other, (list, tuple)) else [other]
    return [
        value
        for value in values
        if _contains(other, cast_fn(value) if cast_fn else value, cast_fn)
    ]


def difference(
    values: Sequence[T], other: Any, cast_fn: Callable[[Any], Any] | None = None
) -> list[T]:
    """Values of ``values`` that do not appear in ``other``."""
    other = other if isinstance(other, (list, tuple)) else [other]
    return [
        value
        for value in values
        if not _contains(other, cast_fn(value) if cast_fn else value, cast_fn)
    ]


def exclusive(
    values: Sequence[Any], other: Any, cast_fn: Callable[[Any], Any] | None = None
) -> list[Any]:
    """Values found in exactly one of the two sequences."""
    other = other if isinstance(other, (list, tuple)) else [other]
    common = shared(values, other, cast_fn)
    return difference(values, common, cast_fn) + difference(other, common, cast_fn)


def first(values: Sequence[T]) -> T | None:
    return values[0] if values else None


def last(values: Sequence[T]) -> T | None:
    return values[-1] if values else None


def clean(values: MutableSequence[T], delete_value: Any = None) -> MutableSequence[T]:
    """Remove every occurrence of ``delete_value`` in place and return ``values``."""
    index = 0
    while index < len(values):
        item = values[index]
        if item is delete_value or (
            type(item) is type(delete_value) and item == delete_value
        ):
            del values[index]
        else:
            index += 1
    return values
