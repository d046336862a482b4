from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from typing import TYPE_CHECKING
from typing import Any

from evented.errors import as_exception

if TYPE_CHECKING:
    from evented.informer.informer import Informer
    from evented.informer.matching import EventType

logger = logging.getLogger(__name__)


def _settle(
    future: asyncio.Future[bool] | concurrent.futures.Future[bool],
    error: Any,
    stopped: bool,
    type_name: Any,
) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(as_exception(error, event_type=str(type_name)))
    else:
        future.set_result(stopped)


def emit_future(
    informer: Informer,
    type_: EventType,
    *args: Any,
    loop: asyncio.AbstractEventLoop | None = None,
) -> asyncio.Future[bool]:
    """Emit ``type_`` and return a future for the emission's outcome.

    The future resolves with the ``stopped`` flag once every listener has
    finished (False straight away when nobody listens), or fails with the
    emission's error.

    Raises:
        RuntimeError: If ``loop`` is omitted and no event loop is running.
    """
    if loop is None:
        loop = asyncio.get_running_loop()
    future: asyncio.Future[bool] = loop.create_future()

    def on_complete(error: Any, stopped: bool) -> None:
        _settle(future, error, stopped, type_)

    try:
        matched = informer.emit_with_callback(type_, args, on_complete)
    except Exception as exc:
        if not future.done():
            future.set_exception(exc)
        return future

    if not matched and not future.done():
        future.set_result(False)
    return future


def emit_threadsafe(
    informer: Informer,
    loop: asyncio.AbstractEventLoop,
    type_: EventType,
    *args: Any,
) -> concurrent.futures.Future[bool] | None:
    """Emit ``type_`` on ``loop`` from any thread.

    Listeners always run on the loop's own thread. Returns a concurrent
    future with the same outcome as ``emit_future``, or ``None`` when
    scheduling is not possible (for example if the loop is closed/stopped).
    """
    if loop.is_closed() or not loop.is_running():
        logger.debug("Not emitting %r: target event loop is not running", type_)
        return None

    result: concurrent.futures.Future[bool] = concurrent.futures.Future()

    def deliver() -> None:
        if not result.set_running_or_notify_cancel():
            return

        def on_complete(error: Any, stopped: bool) -> None:
            _settle(result, error, stopped, type_)

        try:
            matched = informer.emit_with_callback(type_, args, on_complete)
        except Exception as exc:
            if not result.done():
                result.set_exception(exc)
            return

        if not matched and not result.done():
            result.set_result(False)

    try:
        loop.call_soon_threadsafe(deliver)
    except RuntimeError:
        logger.debug("Not emitting %r: target event loop closed", type_)
        return None
    return result
