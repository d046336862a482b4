"""The context object handed to every listener call."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import TYPE_CHECKING
from typing import Any
from typing import Callable

if TYPE_CHECKING:
    from evented.informer.informer import Informer

logger = logging.getLogger(__name__)

SERIES = "series"
PARALLEL = "parallel"
WAIT_MODES = (SERIES, PARALLEL)

Completion = Callable[..., None]


class DispatchContext:
    """Per listener, per emission view on an informer.

    Listeners receive one of these as their first argument. It carries the
    event ``type`` and ``filter`` and lets the listener go asynchronous with
    ``wait`` or cut the emission short with ``stop``. Any other attribute is
    looked up on the informer itself, so ``context.emit(...)`` works.
    """

    def __init__(
        self,
        informer: Informer,
        type_: str,
        filter_: Mapping[str, Any] | None = None,
        *,
        past: bool = False,
        on_stop: Callable[[], None] | None = None,
    ) -> None:
        self.informer = informer
        self.type = type_
        self.filter = filter_
        self.past = past
        self.mode: str | None = None
        self.is_done = False
        self.error: Any = None
        self.stopped = False
        self._on_stop = on_stop
        self._callback: Completion | None = None

    def __getattr__(self, name: str) -> Any:
        # Only reached for names the context itself does not define
        if name.startswith("__"):
            raise AttributeError(name)
        informer = self.__dict__.get("informer")
        if informer is None:
            raise AttributeError(name)
        return getattr(informer, name)

    def __repr__(self) -> str:
        return (
            f"<DispatchContext type={self.type!r} filter={self.filter!r} "
            f"mode={self.mode!r} done={self.is_done}>"
        )

    @property
    def is_async(self) -> bool:
        return self.mode is not None

    def wait(self, mode: str = SERIES) -> Completion:
        """Declare this listener asynchronous and return its completion function.

        ``series`` keeps the next listener from starting until completion is
        signalled; ``parallel`` lets it start right away while the emission as
        a whole still waits. Call the returned function, optionally with an
        error, when the work is finished.
        """
        if mode not in WAIT_MODES:
            raise ValueError(f"wait mode must be 'series' or 'parallel', not {mode!r}")
        self.mode = mode
        return self.complete

    def stop(self) -> None:
        """Keep every later listener of this emission from being called."""
        logger.debug("Listener for %r asked to stop the emission", self.type)
        self.stopped = True
        if self._on_stop is not None:
            self._on_stop()

    def complete(self, error: Any = None) -> None:
        """Mark the listener finished, optionally with an error. Repeat calls are ignored."""
        if self.is_done:
            logger.debug("Listener for %r signalled completion more than once", self.type)
            return
        self.error = error
        self.is_done = True

        callback, self._callback = self._callback, None
        if callback is not None:
            callback(error)

    def when_done(self, callback: Completion) -> None:
        """Call ``callback(error)`` once the listener has completed (right away if it has)."""
        if self.is_done:
            callback(self.error)
        else:
            self._callback = callback
