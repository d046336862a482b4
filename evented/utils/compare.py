"""The coercing equality shared by filter matching and the collection helpers.

``loose_equals`` is deliberately looser than ``==``: filters are often built
from loosely typed sources (query strings, JSON) and ``{"id": "5"}`` has to
match an emission carrying ``{"id": 5}``.

Rules, in order:

* ``None`` and ``MISSING`` (an absent key) equal each other and nothing else.
* NaN equals nothing, not even itself.
* ``bool`` compares as the integer 0 or 1.
* A number compared with a string parses the stripped string as a numeric
  literal: decimal with optional sign and exponent, ``Infinity``, or an
  unsigned ``0x``/``0o``/``0b`` integer. The empty string is 0; anything
  else (``"1_000"``, ``"inf"``, ``"nan"``) is simply unequal.
* Everything else falls back to ``==``.
"""

from __future__ import annotations

import math
import re
from numbers import Number
from typing import Any


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_RADIX = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")
_INFINITY = re.compile(r"([+-]?)Infinity")


def _is_nothing(value: Any) -> bool:
    return value is None or value is MISSING


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _to_number(value: str) -> float | int | None:
    text = value.strip()
    if not text:
        return 0.0
    if _DECIMAL.fullmatch(text):
        return float(text)
    if _RADIX.fullmatch(text):
        return int(text, 0)
    infinity = _INFINITY.fullmatch(text)
    if infinity:
        return -math.inf if infinity.group(1) == "-" else math.inf
    return None


def loose_equals(a: Any, b: Any) -> bool:
    """Compare two values the forgiving way described in the module docstring."""
    if a is b:
        return not _is_nan(a)

    if _is_nothing(a) or _is_nothing(b):
        return _is_nothing(a) and _is_nothing(b)

    if _is_nan(a) or _is_nan(b):
        return False

    if isinstance(a, bool):
        a = int(a)
    if isinstance(b, bool):
        b = int(b)

    if _is_number(a) and isinstance(b, str):
        parsed = _to_number(b)
        return parsed is not None and a == parsed
    if isinstance(a, str) and _is_number(b):
        parsed = _to_number(a)
        return parsed is not None and parsed == b

    try:
        return bool(a == b)
    except Exception:  # noqa: BLE001 - exotic __eq__ implementations
        return False
