"""Exception hierarchy for evented.

Every exception raised by the library itself derives from ``EventedError``.
The ones that signal a bad argument also derive from ``TypeError`` so that
callers catching the builtin keep working.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class EventedError(Exception):
    """Base exception for all evented errors."""

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a plain dictionary."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (caused by: {self.cause!s})"
        return self.message


class ConfigurationError(EventedError):
    """Raised when there's a configuration problem."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, error_code="ConfigurationError", details=details, **kwargs)
        self.config_key = config_key


class ListenerTypeError(EventedError, TypeError):
    """Raised when something that is not callable is offered as a listener."""

    def __init__(self, listener: Any, **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        details["listener_type"] = type(listener).__name__
        super().__init__(
            "listener must be a function",
            error_code="ListenerTypeError",
            details=details,
            **kwargs,
        )
        self.listener = listener


class EventTypeError(EventedError, TypeError):
    """Raised when an event type is neither a string nor a filter mapping."""

    def __init__(self, type_: Any, **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        details["type"] = type(type_).__name__
        super().__init__(
            "event type must be a string or a mapping",
            error_code="EventTypeError",
            details=details,
            **kwargs,
        )
        self.type = type_


class UnhandledErrorEvent(EventedError, TypeError):
    """Raised when an ``error`` event carrying a non-exception goes unheard."""

    def __init__(self, value: Any = None, **kwargs: Any) -> None:
        super().__init__(
            'Uncaught, unspecified "error" event.',
            error_code="UnhandledErrorEvent",
            **kwargs,
        )
        self.value = value


class ListenerError(EventedError):
    """Wraps a non-exception value a listener reported through ``done``."""

    def __init__(self, value: Any, *, event_type: str | None = None, **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        if event_type is not None:
            details["event_type"] = event_type
        super().__init__(
            f"Listener reported an error: {value!r}",
            error_code="ListenerError",
            details=details,
            **kwargs,
        )
        self.value = value
        self.event_type = event_type


class CombinedListenerError(EventedError):
    """Both the series listeners and the parallel listeners of one emission failed."""

    def __init__(self, main_error: Any, side_error: Any, **kwargs: Any) -> None:
        super().__init__(
            f"Series and parallel listeners both failed: {main_error!r}, {side_error!r}",
            error_code="CombinedListenerError",
            **kwargs,
        )
        self.errors = (main_error, side_error)

    def __iter__(self):
        return iter(self.errors)


def as_exception(error: Any, *, event_type: str | None = None) -> BaseException:
    """Return ``error`` itself if it can be raised, otherwise wrap it."""
    if isinstance(error, BaseException):
        return error
    logger.debug("Wrapping non-exception listener error %r", error)
    return ListenerError(error, event_type=event_type)
