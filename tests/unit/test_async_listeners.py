"""Coroutine listeners and awaiting emissions on the running loop."""

from __future__ import annotations

import asyncio
import logging

import pytest

from evented.config import config_context
from evented.errors import EventedError
from evented.errors import ListenerError
from evented.informer import Informer
from evented.utils.threadsafe_async import emit_future


@pytest.mark.asyncio
async def test_coroutine_listeners_run_in_series_by_default():
    e = Informer()
    order = []

    async def first(ctx):
        order.append("first-start")
        await asyncio.sleep(0)
        order.append("first-end")

    async def second(ctx):
        order.append("second")

    e.on("t", first)
    e.on("t", second)

    stopped = await e.emit_async("t")

    assert stopped is False
    assert order == ["first-start", "first-end", "second"]


@pytest.mark.asyncio
async def test_coroutine_listeners_in_parallel_mode():
    e = Informer()
    order = []
    release = asyncio.Event()

    async def slow(ctx):
        order.append("slow-start")
        await release.wait()
        order.append("slow-end")

    async def fast(ctx):
        order.append("fast")
        release.set()

    e.on("t", slow)
    e.on("t", fast)

    with config_context(coroutine_wait_mode="parallel"):
        await e.emit_async("t")

    # In series mode this would deadlock: slow waits for fast
    assert order[-1] == "slow-end"
    assert set(order) == {"slow-start", "fast", "slow-end"}


@pytest.mark.asyncio
async def test_coroutine_error_is_raised_by_emit_async():
    e = Informer()

    async def bad(ctx):
        await asyncio.sleep(0)
        raise RuntimeError("async boom")

    e.on("t", bad)

    with pytest.raises(RuntimeError, match="async boom"):
        await e.emit_async("t")


@pytest.mark.asyncio
async def test_emit_async_reports_stop():
    e = Informer()
    calls = []

    async def stopper(ctx):
        ctx.stop()

    e.on("t", stopper)
    e.on("t", lambda ctx: calls.append("late"))

    assert await e.emit_async("t") is True
    assert calls == []


@pytest.mark.asyncio
async def test_emit_async_without_listeners():
    e = Informer()
    assert await e.emit_async("nobody") is False


@pytest.mark.asyncio
async def test_emit_async_does_not_pass_callback_to_listeners():
    e = Informer()
    received = []
    e.on("t", lambda ctx, *args: received.append(args))

    await e.emit_async("t", 1, 2)
    assert received == [(1, 2)]


@pytest.mark.asyncio
async def test_emit_future_wraps_non_exception_errors():
    e = Informer()
    e.on("t", lambda ctx: ctx.wait("series")("plain value"))

    with pytest.raises(ListenerError) as exc_info:
        await emit_future(e, "t")
    assert exc_info.value.value == "plain value"


@pytest.mark.asyncio
async def test_emit_future_propagates_unhandled_error_event():
    e = Informer()
    error = ValueError("unheard")
    with pytest.raises(ValueError):
        await emit_future(e, "error", error)


@pytest.mark.asyncio
async def test_listener_calling_wait_keeps_control_of_completion():
    e = Informer()
    loop = asyncio.get_running_loop()
    order = []

    def listener(ctx):
        done = ctx.wait("series")

        async def work():
            order.append("work")

        loop.call_later(0.01, lambda: (order.append("done"), done()))
        return work()

    e.on("t", listener)
    e.on("t", lambda ctx: order.append("next"))

    await e.emit_async("t")
    assert order == ["work", "done", "next"]


def test_coroutine_listener_without_running_loop():
    e = Informer()

    async def listener(ctx):
        pass

    e.on("t", listener)

    with pytest.raises(EventedError, match="no event loop is running"):
        e.emit("t")


def test_after_replays_coroutine_listener_needs_loop():
    e = Informer()
    e.emit("t")

    async def listener(ctx):
        pass

    with pytest.raises(EventedError):
        e.after("t", listener)
    assert e.listeners("t") == []


@pytest.mark.asyncio
async def test_after_reports_failing_coroutine_catch_up(caplog):
    e = Informer()
    e.emit("t")
    ran = asyncio.Event()

    async def listener(ctx):
        ran.set()
        raise RuntimeError("late boom")

    with caplog.at_level(logging.ERROR, logger="evented.informer.informer"):
        e.after("t", listener)
        await asyncio.wait_for(ran.wait(), timeout=1.0)
        for _ in range(3):
            await asyncio.sleep(0)

    records = [r for r in caplog.records if r.name == "evented.informer.informer"]
    assert len(records) == 1
    assert "'t'" in records[0].getMessage()
    assert isinstance(records[0].exc_info[1], RuntimeError)
    # The listener stays subscribed for future emissions
    assert len(e.listeners("t")) == 1
