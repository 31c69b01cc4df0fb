# src/logrelay/tests/test_logging/test_buffering.py
import asyncio
import logging

import pytest

from logrelay.core.buffering import BufferController
from logrelay.core.stores import InMemoryBufferStore
from logrelay.models.config import BufferingOptions


class BatchRecorder:
    """Flush handler that records each batch's messages."""

    def __init__(self):
        self.batches: list[list[str]] = []

    async def __call__(self, entries):
        self.batches.append([entry.message for entry in entries])


class BrokenSaveStore(InMemoryBufferStore):
    async def save(self, entries):
        raise OSError("disk full")


def options(**kwargs) -> BufferingOptions:
    kwargs.setdefault("flush_interval_ms", 0)
    return BufferingOptions(enabled=True, **kwargs)


@pytest.mark.asyncio
async def test_reaching_max_buffer_size_flushes_once_in_order(entry_factory):
    handler = BatchRecorder()
    controller = BufferController(options(max_buffer_size=3), handler)

    for message in ("one", "two", "three"):
        await controller.enqueue(entry_factory(message))

    assert handler.batches == [["one", "two", "three"]]
    assert controller.pending == ()


@pytest.mark.asyncio
async def test_below_threshold_nothing_is_flushed(entry_factory):
    handler = BatchRecorder()
    store = InMemoryBufferStore()
    controller = BufferController(options(max_buffer_size=3, store=store), handler)

    await controller.enqueue(entry_factory("one"))
    await controller.enqueue(entry_factory("two"))

    assert handler.batches == []
    # save-after-every-enqueue: the store mirrors the in-memory buffer
    assert [e.message for e in await store.load()] == ["one", "two"]


@pytest.mark.asyncio
async def test_concurrent_flushes_share_one_execution(entry_factory):
    gate = asyncio.Event()
    batches = []

    async def handler(entries):
        batches.append([entry.message for entry in entries])
        await gate.wait()

    controller = BufferController(options(), handler)
    for message in ("m0", "m1", "m2"):
        await controller.enqueue(entry_factory(message))

    flushes = [asyncio.create_task(controller.flush()) for _ in range(5)]
    while not batches:
        await asyncio.sleep(0)
    assert controller.flush_in_progress

    # arrives while the handler is running: belongs to the next batch
    await controller.enqueue(entry_factory("late"))
    gate.set()
    await asyncio.gather(*flushes)

    assert batches == [["m0", "m1", "m2"]]
    assert not controller.flush_in_progress

    await controller.flush()
    assert batches == [["m0", "m1", "m2"], ["late"]]


@pytest.mark.asyncio
async def test_flush_with_empty_buffer_does_not_call_handler():
    handler = BatchRecorder()
    controller = BufferController(options(), handler)
    await controller.flush()
    assert handler.batches == []
    assert controller.is_ready


@pytest.mark.asyncio
async def test_persisted_backlog_is_flushed_before_new_entries(entry_factory):
    store = InMemoryBufferStore()
    await store.save([entry_factory("old-1"), entry_factory("old-2")])

    handler = BatchRecorder()
    controller = BufferController(options(store=store), handler)
    assert not controller.is_ready

    await controller.enqueue(entry_factory("new-1"))
    assert controller.is_ready
    assert [e.message for e in await store.load()] == ["old-1", "old-2", "new-1"]

    await controller.flush()
    assert handler.batches == [["old-1", "old-2", "new-1"]]
    assert await store.load() == []


@pytest.mark.asyncio
async def test_timer_flushes_periodically(entry_factory):
    handler = BatchRecorder()
    controller = BufferController(options(flush_interval_ms=20), handler)
    assert controller.timer_active

    await controller.enqueue(entry_factory("tick"))
    await asyncio.sleep(0.1)

    assert handler.batches == [["tick"]]
    await controller.close()


def test_timer_waits_for_a_running_loop():
    controller = BufferController(options(flush_interval_ms=20), BatchRecorder())
    assert not controller.timer_active


@pytest.mark.asyncio
async def test_timer_is_disabled_for_zero_interval():
    controller = BufferController(options(flush_interval_ms=0), BatchRecorder())
    assert not controller.timer_active


@pytest.mark.asyncio
async def test_dispose_flushes_and_timer_never_fires_again(entry_factory):
    handler = BatchRecorder()
    controller = BufferController(options(flush_interval_ms=20), handler)
    await controller.enqueue(entry_factory("before-dispose"))

    final = controller.dispose()
    assert not controller.timer_active
    await final
    assert handler.batches == [["before-dispose"]]

    await controller.enqueue(entry_factory("after-dispose"))
    await asyncio.sleep(0.1)

    assert handler.batches == [["before-dispose"]]
    assert not controller.timer_active
    assert controller.dispose() is None


def test_dispose_without_running_loop_runs_final_flush(entry_factory):
    handler = BatchRecorder()
    store = InMemoryBufferStore()
    asyncio.run(store.save([entry_factory("pending")]))
    controller = BufferController(options(store=store), handler)

    assert controller.dispose() is None
    assert handler.batches == [["pending"]]


@pytest.mark.asyncio
async def test_store_errors_propagate_and_memory_stays_consistent(entry_factory):
    controller = BufferController(options(store=BrokenSaveStore()), BatchRecorder())

    with pytest.raises(OSError):
        await controller.enqueue(entry_factory("lost"))
    assert controller.pending == ()


@pytest.mark.asyncio
async def test_handler_failure_is_lossy_but_controller_keeps_working(entry_factory):
    store = InMemoryBufferStore()
    calls = []

    async def handler(entries):
        calls.append([entry.message for entry in entries])
        if len(calls) == 1:
            raise RuntimeError("all transports down")

    controller = BufferController(options(store=store), handler)
    await controller.enqueue(entry_factory("first"))

    with pytest.raises(RuntimeError):
        await controller.flush()
    # the batch was cleared before the handler ran and is not re-queued
    assert await store.load() == []
    assert controller.pending == ()

    await controller.enqueue(entry_factory("second"))
    await controller.flush()
    assert calls == [["first"], ["second"]]


@pytest.mark.asyncio
async def test_periodic_flush_failure_is_reported_and_retried(entry_factory, caplog):
    caplog.set_level(logging.ERROR, logger="logrelay")
    calls = []

    async def handler(entries):
        calls.append([entry.message for entry in entries])
        if len(calls) == 1:
            raise RuntimeError("flaky")

    controller = BufferController(options(flush_interval_ms=15), handler)
    await controller.enqueue(entry_factory("a"))
    await asyncio.sleep(0.05)
    await controller.enqueue(entry_factory("b"))
    await asyncio.sleep(0.05)
    await controller.close()

    assert calls[:2] == [["a"], ["b"]]
    assert "Periodic buffer flush failed" in caplog.text


def test_timer_restarts_on_a_new_event_loop(entry_factory):
    handler = BatchRecorder()
    controller = BufferController(options(flush_interval_ms=20), handler)
    observed = {}

    async def first_loop():
        await controller.enqueue(entry_factory("one"))
        await asyncio.sleep(0.1)

    async def second_loop():
        await controller.enqueue(entry_factory("two"))
        observed["timer_active"] = controller.timer_active
        await asyncio.sleep(0.1)

    # asyncio.run() cancels the timer task when the first loop ends
    asyncio.run(first_loop())
    asyncio.run(second_loop())

    assert observed["timer_active"] is True
    assert handler.batches == [["one"], ["two"]]
    controller.dispose()


def test_flush_left_behind_by_a_closed_loop_does_not_block(entry_factory):
    handler = BatchRecorder()
    controller = BufferController(options(), handler)

    async def abandon_flush():
        await controller.enqueue(entry_factory("one"))
        asyncio.ensure_future(controller.flush())
        # the flush registers its shared task, which the loop cancels before it starts
        await asyncio.sleep(0)
        assert controller.flush_in_progress

    async def flush_again():
        await controller.enqueue(entry_factory("two"))
        await controller.flush()

    asyncio.run(abandon_flush())
    asyncio.run(flush_again())

    assert handler.batches == [["one", "two"]]
