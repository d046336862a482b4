"""The emit pipeline.

One ``Emission`` is built per ``Informer.emit`` call that matched at least
one listener. Every listener becomes a task for ``flow.series``:

* a listener that never calls ``wait`` finishes when it returns;
* a ``series`` listener holds the queue until it signals completion;
* a ``parallel`` listener lets the queue move on, its completion is
  collected on a side list that is drained with ``flow.parallel`` once the
  main queue is through.

Once everything has finished the trailing callback (a callable last
argument) receives ``(error, stopped)``. Without one, an error is raised.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
import inspect
import logging
from typing import TYPE_CHECKING
from typing import Any
from typing import Callable

from evented.errors import CombinedListenerError
from evented.errors import EventedError
from evented.errors import as_exception
from evented.informer.context import SERIES
from evented.informer.context import DispatchContext
from evented.utils import flow

if TYPE_CHECKING:
    from collections.abc import Sequence

    from evented.informer.informer import Informer
    from evented.informer.matching import ListenerEntry

logger = logging.getLogger(__name__)


def schedule_awaitable(awaitable: Any, type_name: str) -> asyncio.Future[Any]:
    """Run an awaitable a listener returned on the running event loop.

    Raises:
        EventedError: If no event loop is running in this thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        raise EventedError(
            "Listener returned an awaitable but no event loop is running",
            error_code="NoRunningLoop",
            details={"event_type": type_name},
        ) from None
    return asyncio.ensure_future(awaitable)


def combine_errors(main_error: Any, side_error: Any) -> Any:
    """Keep both errors when the main queue and the side list failed."""
    if main_error is not None and side_error is not None:
        return CombinedListenerError(main_error, side_error)
    return main_error if main_error is not None else side_error


class Emission:
    """State of a single emit call while its listeners run."""

    def __init__(
        self,
        informer: Informer,
        type_name: str,
        filter_: Mapping[str, Any] | None,
        entries: Sequence[ListenerEntry],
        args: tuple[Any, ...],
        *,
        callback: Callable[[Any, bool], Any] | None = None,
        coroutine_mode: str = SERIES,
    ) -> None:
        self.informer = informer
        self.type_name = type_name
        self.filter = filter_
        self.entries = list(entries)
        self.args = args
        self.callback = callback
        self.coroutine_mode = coroutine_mode

        self.stopped = False
        self.is_async = False
        self._side_tasks: list[flow.Task] = []

    def run(self) -> None:
        flow.series([self._task_for(entry) for entry in self.entries], self._main_done)

    def _stop(self) -> None:
        self.stopped = True

    def _task_for(self, entry: ListenerEntry) -> flow.Task:
        def run_listener(next_: flow.Next) -> None:
            if self.stopped:
                next_()
                return

            context = DispatchContext(
                self.informer, self.type_name, self.filter, on_stop=self._stop
            )
            result = entry.listener(context, *self.args)

            if inspect.isawaitable(result):
                self._adopt_awaitable(context, result)

            if not context.is_async:
                next_()
                return

            self.is_async = True

            if context.mode == SERIES:
                context.when_done(next_)
                return

            # Parallel: let the queue go on, settle up after it
            self._side_tasks.append(context.when_done)
            next_()

        return run_listener

    def _adopt_awaitable(self, context: DispatchContext, awaitable: Any) -> None:
        future = schedule_awaitable(awaitable, self.type_name)
        owned = not context.is_async
        complete = context.wait(self.coroutine_mode) if owned else context.complete

        def settle(done_future: asyncio.Future[Any]) -> None:
            if done_future.cancelled():
                error: BaseException | None = asyncio.CancelledError()
            else:
                error = done_future.exception()

            # A listener that called wait() itself decides when it is done,
            # unless its coroutine blew up first
            if owned or error is not None:
                complete(error)

        future.add_done_callback(settle)

    def _main_done(self, error: Any) -> None:
        if not self.is_async or not self._side_tasks:
            self._finish(error)
            return

        def side_done(side_error: Any) -> None:
            self._finish(combine_errors(error, side_error))

        flow.parallel(self._side_tasks, side_done)

    def _finish(self, error: Any) -> None:
        logger.debug(
            "Emission of %r finished (async=%s, stopped=%s, error=%r)",
            self.type_name,
            self.is_async,
            self.stopped,
            error,
        )
        if self.callback is not None:
            self.callback(error, self.stopped)
            return

        if error is not None:
            raise as_exception(error, event_type=self.type_name)
