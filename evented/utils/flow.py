"""Callback style task runners.

A task is a callable taking one argument, ``next_``, which it must call
exactly once with an optional error when it is finished. It may do so before
returning (synchronous task) or any time later (asynchronous task).

Neither runner defers anything on its own: every task that can run right now
runs inside the call to ``series``/``parallel``, and ``on_done`` is called in
that same call if all tasks finished synchronously. The informer relies on
this to tell synchronous emissions apart from asynchronous ones.

A task that raises counts as finishing with that exception.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
from typing import Any
from typing import Callable

logger = logging.getLogger(__name__)

Next = Callable[..., None]
Task = Callable[[Next], Any]
Done = Callable[[Any], Any]


class _SeriesRun:
    """One run of ``series``, driven by a loop instead of recursion."""

    def __init__(self, tasks: Iterable[Task], on_done: Done) -> None:
        self._tasks = list(tasks)
        self._on_done = on_done
        self._index = 0
        self._error: Any = None
        self._failed = False
        self._driving = False
        self._advanced = False
        self._finished = False

    def _next_for(self, index: int) -> Next:
        called = False

        def next_(error: Any = None) -> None:
            nonlocal called
            if called or self._finished:
                logger.debug("Ignoring repeated completion of series task %d", index)
                return
            called = True

            if error is not None:
                self._failed = True
                self._error = error

            self._index = index + 1
            self._advanced = True

            if not self._driving:
                self._drive()

        return next_

    def _drive(self) -> None:
        self._driving = True
        try:
            while not self._failed and self._index < len(self._tasks):
                self._advanced = False
                index = self._index
                try:
                    self._tasks[index](self._next_for(index))
                except Exception as exc:
                    self._failed = True
                    self._error = exc
                    break

                # The task has not called next_ yet, it will resume us later
                if not self._advanced:
                    return
        finally:
            self._driving = False

        self._finished = True
        self._on_done(self._error)


def series(tasks: Iterable[Task], on_done: Done) -> None:
    """Run ``tasks`` one at a time, in order, stopping at the first error.

    ``on_done`` receives that error, or None.
    """
    _SeriesRun(tasks, on_done)._drive()


def parallel(tasks: Iterable[Task], on_done: Done) -> None:
    """Start every task right away and call ``on_done`` once all have finished.

    ``on_done`` receives the first error reported (in completion order), or None.
    """
    tasks = list(tasks)
    remaining = len(tasks)
    first_error: Any = None
    launching = True
    finished = False

    def finish() -> None:
        nonlocal finished
        finished = True
        on_done(first_error)

    def next_for(index: int) -> Next:
        called = False

        def next_(error: Any = None) -> None:
            nonlocal called, remaining, first_error
            if called or finished:
                logger.debug("Ignoring repeated completion of parallel task %d", index)
                return
            called = True

            if error is not None and first_error is None:
                first_error = error

            remaining -= 1
            if remaining == 0 and not launching:
                finish()

        return next_

    for index, task in enumerate(tasks):
        next_ = next_for(index)
        try:
            task(next_)
        except Exception as exc:
            next_(exc)

    launching = False
    if remaining == 0:
        finish()
