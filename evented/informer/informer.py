"""The Informer: a queryable event emitter.

Listeners subscribe either to a plain type name or to a filter mapping. A
filter listener is called for every emission whose filter contains all of
the listener's keys with (loosely) equal values; a filter without a
``"type"`` key listens across every type.

The informer also remembers what it has emitted, which is what ``after``
and ``emit_once`` build on.

Listeners are called as ``listener(context, *args)``, see
``evented.informer.context.DispatchContext``.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
import inspect
import logging
from typing import Any
from typing import Callable

from evented.config import InformerConfig
from evented.config import get_config
from evented.errors import ListenerTypeError
from evented.errors import UnhandledErrorEvent
from evented.informer.context import DispatchContext
from evented.informer.dispatch import Emission
from evented.informer.dispatch import schedule_awaitable
from evented.informer.matching import EventType
from evented.informer.matching import Listener
from evented.informer.matching import ListenerEntry
from evented.informer.matching import filter_matches
from evented.informer.matching import normalize_type
from evented.utils.arrays import last
from evented.utils.functions import create_function
from evented.utils.functions import is_name_allowed
from evented.utils.threadsafe_async import emit_future

logger = logging.getLogger(__name__)

NEW_LISTENER = "newListener"
REMOVE_LISTENER = "removeListener"

CompletionCallback = Callable[[Any, bool], Any]


def _ensure_callable(listener: Any) -> None:
    if not callable(listener):
        raise ListenerTypeError(listener)


def _split_times(times: Any, listener: Any, default: int) -> tuple[int, Any]:
    # The count is optional and sits in front of the listener
    if not isinstance(times, int) or isinstance(times, bool):
        return default, times
    return times, listener


def _report_catch_up_failure(type_name: str) -> Callable[[Any], None]:
    def report(future: Any) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(
                "error in catch-up listener for %r", type_name, exc_info=error
            )

    return report


def _wrapper_name(prefix: str, listener: Listener) -> str:
    name = f"{prefix}_{getattr(listener, '__name__', '')}"
    return name if is_name_allowed(name) else prefix


class Informer:
    """A filterable, replay-aware event emitter meant to be subclassed."""

    def __init__(self, *, config: InformerConfig | None = None) -> None:
        if config is not None:
            config.validate()
        self._config = config
        limit = (config or get_config()).filter_seen_limit

        # Listeners keyed by type name only
        self.simple_listeners: dict[str, list[ListenerEntry]] = {}

        # Listeners with a filter, keyed by the filter's type name ("" for any)
        self.filter_listeners: dict[str, list[ListenerEntry]] = {}

        # Every type name a filter listener was ever registered under
        self.listen_types: list[str] = []

        self.simple_seen: dict[str, bool] = {}
        self.filter_seen: list[Mapping[str, Any]] | deque[Mapping[str, Any]] = (
            [] if limit is None else deque(maxlen=limit)
        )

    @property
    def config(self) -> InformerConfig:
        return self._config or get_config()

    def _has_listeners(self, type_name: str) -> bool:
        return bool(self.simple_listeners.get(type_name) or self.filter_listeners.get(type_name))

    # ------------------------------------------------------------------
    # Subscribing
    # ------------------------------------------------------------------

    def add_listener(self, type_: EventType, listener: Listener) -> Informer:
        """Call ``listener`` for every emission of ``type_``.

        ``type_`` is a type name or a filter mapping. Fires ``newListener``
        first when anybody listens for it.

        Raises:
            ListenerTypeError: If ``listener`` is not callable.
            EventTypeError: If ``type_`` is neither a string nor a mapping.
        """
        _ensure_callable(listener)
        type_name, filter_ = normalize_type(type_)

        if self._has_listeners(NEW_LISTENER):
            original = getattr(listener, "listener", None) or listener
            self.emit_with_callback(NEW_LISTENER, (type_, original, type_name))

        if filter_ is None:
            self.simple_listeners.setdefault(type_name, []).append(ListenerEntry(listener))
        else:
            if type_name not in self.filter_listeners:
                self.filter_listeners[type_name] = []
                if type_name not in self.listen_types:
                    self.listen_types.append(type_name)
            self.filter_listeners[type_name].append(ListenerEntry(listener, filter_))

        logger.debug("Added listener %r for %r", listener, type_)
        return self

    on = add_listener

    def _counting_wrapper(
        self, type_: EventType, times: int, listener: Listener, prefix: str
    ) -> Listener:
        _ensure_callable(listener)
        fired = 0

        def fire(context: DispatchContext, *args: Any) -> Any:
            nonlocal fired
            fired += 1
            if times > 0 and fired >= times:
                context.informer.remove_listener(type_, wrapper)
            return listener(context, *args)

        wrapper = create_function(_wrapper_name(prefix, listener), fire)
        wrapper.listener = listener  # type: ignore[attr-defined]
        return wrapper

    def many(self, type_: EventType, times: Any, listener: Listener | None = None) -> Informer:
        """Listen for at most ``times`` emissions (once when ``times`` is left out)."""
        times, listener = _split_times(times, listener, 1)
        self.on(type_, self._counting_wrapper(type_, times, listener, "many"))
        return self

    once = many

    def after(self, type_: EventType, times: Any, listener: Listener | None = None) -> Informer:
        """Like ``many``, but also fire right away if ``type_`` was already emitted.

        ``times`` defaults to unlimited (any negative number). The catch-up
        call gets a context with ``past`` set and no arguments; the original
        arguments are not kept around.
        """
        times, listener = _split_times(times, listener, -1)
        wrapper = self._counting_wrapper(type_, times, listener, "after")
        self.on(type_, wrapper)

        if self.has_been_seen(type_):
            type_name, filter_ = normalize_type(type_)
            logger.debug("Replaying past %r for a late listener", type_)
            try:
                result = wrapper(DispatchContext(self, type_name, filter_, past=True))
                if inspect.isawaitable(result):
                    future = schedule_awaitable(result, type_name)
                    future.add_done_callback(_report_catch_up_failure(type_name))
            except BaseException:
                self.remove_listener(type_, wrapper)
                raise

        return self

    def after_once(
        self, type_: EventType, times: Any, listener: Listener | None = None
    ) -> Informer:
        """``after`` with ``times`` defaulting to 1."""
        times, listener = _split_times(times, listener, 1)
        return self.after(type_, times, listener)

    after_many = after_once

    # ------------------------------------------------------------------
    # Unsubscribing
    # ------------------------------------------------------------------

    def remove_listener(self, type_: EventType, listener: Listener) -> Informer:
        """Remove ``listener`` (or the once/after wrapper around it) from ``type_``.

        For a filter, only entries whose stored filter is ``type_`` itself or
        whose keys all loosely equal those of ``type_`` are removed.
        """
        _ensure_callable(listener)
        type_name, filter_ = normalize_type(type_)

        removed: list[ListenerEntry] = []
        if filter_ is None:
            entries = self.simple_listeners.get(type_name, [])
            # Walk backwards so popping does not skip neighbours
            for index in range(len(entries) - 1, -1, -1):
                if entries[index].is_for(listener):
                    removed.append(entries.pop(index))
        else:
            entries = self.filter_listeners.get(type_name, [])
            for index in range(len(entries) - 1, -1, -1):
                entry = entries[index]
                if not entry.is_for(listener):
                    continue
                if entry.filter is filter_ or filter_matches(entry.filter, filter_):
                    removed.append(entries.pop(index))

        for entry in removed:
            logger.debug("Removed listener %r for %r", entry.listener, type_)
            if self._has_listeners(REMOVE_LISTENER):
                self.emit_with_callback(REMOVE_LISTENER, (type_, entry.original))

        return self

    off = remove_listener

    def remove_all_listeners(self, type_: EventType | None = None) -> Informer:
        """Remove every listener for ``type_``.

        A type name also takes out the filter listeners registered under that
        type. A filter removes the filter listeners it matches. With no
        argument everything goes.
        """
        if type_ is None:
            for type_name in list(self.simple_listeners):
                self.remove_all_listeners(type_name)
            for entries in list(self.filter_listeners.values()):
                for entry in list(entries):
                    self.remove_listener(entry.filter, entry.listener)
            return self

        type_name, filter_ = normalize_type(type_)

        if filter_ is None:
            for entry in list(self.simple_listeners.get(type_name, [])):
                self.remove_listener(type_name, entry.listener)
            doomed = list(self.filter_listeners.get(type_name, []))
        else:
            doomed = [
                entry
                for entry in self.filter_listeners.get(type_name, [])
                if entry.filter is filter_ or filter_matches(entry.filter, filter_)
            ]

        for entry in doomed:
            self.remove_listener(entry.filter, entry.listener)

        return self

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def has_been_seen(self, type_: EventType) -> bool:
        """True if ``type_`` (a name, or a filter) matches something emitted before."""
        type_name, filter_ = normalize_type(type_)
        if filter_ is None:
            return self.simple_seen.get(type_name, False)
        return any(filter_matches(filter_, seen) for seen in self.filter_seen)

    def query_listeners(self, type_: EventType, mark_as_seen: bool = True) -> list[Any]:
        """Find everything listening to ``type_``.

        Returns ``[type_name, filter, *entries]``: filter listeners first (the
        ones for ``type_name``, then the typeless ones), simple listeners
        after. The list is a snapshot, later (un)subscriptions don't change it.
        """
        type_name, filter_ = normalize_type(type_)
        result: list[Any] = [type_name, filter_]

        if mark_as_seen:
            self.simple_seen[type_name] = True
            if filter_ is not None:
                self.filter_seen.append(dict(filter_))

        if filter_ is not None:
            types = [type_name, ""] if type_name else list(self.listen_types)
            for name in types:
                for entry in self.filter_listeners.get(name, ()):
                    if filter_matches(entry.filter, filter_):
                        result.append(entry)

        if type_name:
            result.extend(self.simple_listeners.get(type_name, ()))

        return result

    def listeners(self, type_: EventType) -> list[ListenerEntry]:
        """The entries listening to ``type_``, without marking it as seen.

        Unlike an emission, looking listeners up never counts as having seen
        ``type_``; use ``query_listeners`` for the marking lookup.
        """
        return self.query_listeners(type_, mark_as_seen=False)[2:]

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def emit(self, type_: EventType, *args: Any) -> Informer:
        """Call every listener of ``type_`` with ``args``.

        When the last argument is callable it is also the completion callback:
        once all listeners are done it gets ``(error, stopped)``. Without a
        callback a listener error is raised here (or, for an emission that went
        asynchronous, from whoever signalled the last completion).

        Raises:
            UnhandledErrorEvent: ``type_`` is ``"error"``, nobody listens and
                the first argument is not an exception (which is raised as is).
        """
        callback = last(args)
        self.emit_with_callback(type_, args, callback if callable(callback) else None)
        return self

    def emit_with_callback(
        self,
        type_: EventType,
        args: tuple[Any, ...] = (),
        callback: CompletionCallback | None = None,
    ) -> bool:
        """Emit ``args`` with an explicit completion callback.

        Unlike ``emit`` the callback is not passed on to the listeners.
        Returns False when no listener matched, in which case the callback is
        never called.
        """
        found = self.query_listeners(type_, mark_as_seen=True)
        type_name, filter_, entries = found[0], found[1], found[2:]

        if type_ == "error" and not entries:
            error = args[0] if args else None
            if isinstance(error, BaseException):
                raise error
            raise UnhandledErrorEvent(error)

        if not entries:
            return False

        logger.debug("Emitting %r to %d listener(s)", type_, len(entries))
        Emission(
            self,
            type_name,
            filter_,
            entries,
            args,
            callback=callback,
            coroutine_mode=self.config.coroutine_wait_mode,
        ).run()
        return True

    def emit_once(self, type_: EventType, *args: Any) -> Informer:
        """Emit ``type_`` only if it has never been seen before."""
        if not self.has_been_seen(type_):
            self.emit(type_, *args)
        return self

    async def emit_async(self, type_: EventType, *args: Any) -> bool:
        """Emit on the running loop and wait for every listener to finish.

        Returns the ``stopped`` flag, raises the emission's error.
        """
        return await emit_future(self, type_, *args)
