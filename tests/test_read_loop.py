"""Tests for the background read loop."""

import asyncio

from linestream import LineFramer, ReadLoop
from linestream.hal import MemoryStream


async def _wait_for(predicate, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        assert loop.time() < deadline, "condition not reached in time"
        await asyncio.sleep(0.01)


async def _open_loop(retry_delay=0.01):
    stream = MemoryStream()
    await stream.open()
    lines = []
    cancel_event = asyncio.Event()
    read_loop = ReadLoop(stream, LineFramer(), lines.append, cancel_event, retry_delay=retry_delay)
    read_loop.start()
    return stream, lines, cancel_event, read_loop


def test_lines_dispatched_in_order():
    async def scenario():
        stream, lines, cancel_event, read_loop = await _open_loop()
        stream.inject(b"one\ntw")
        stream.inject(b"o\nthree\n")
        await _wait_for(lambda: len(lines) == 3)
        cancel_event.set()
        await asyncio.wait_for(read_loop.task, 1.0)
        return lines

    assert asyncio.run(scenario()) == ["one", "two", "three"]


def test_small_chunk_size_preserves_order():
    async def scenario():
        stream = MemoryStream()
        await stream.open()
        lines = []
        cancel_event = asyncio.Event()
        read_loop = ReadLoop(stream, LineFramer(), lines.append, cancel_event, chunk_size=3)
        read_loop.start()
        stream.inject(b"".join(b"line%d\n" % i for i in range(20)))
        await _wait_for(lambda: len(lines) == 20)
        cancel_event.set()
        await asyncio.wait_for(read_loop.task, 1.0)
        return lines

    assert asyncio.run(scenario()) == ["line%d" % i for i in range(20)]


def test_read_errors_do_not_stop_the_loop():
    async def scenario():
        stream, lines, cancel_event, read_loop = await _open_loop()
        stream.inject_error(OSError("device reports framing error"))
        stream.inject_error(ConnectionResetError())
        stream.inject(b"still alive\n")
        await _wait_for(lambda: lines == ["still alive"])
        assert read_loop.is_running
        cancel_event.set()
        await asyncio.wait_for(read_loop.task, 1.0)

    asyncio.run(scenario())


def test_close_handle_fulfilled_on_exit():
    async def scenario():
        stream, lines, cancel_event, read_loop = await _open_loop()
        close_handle = read_loop.attach_close_handle()
        assert read_loop.attach_close_handle() is close_handle
        assert not close_handle.done()
        cancel_event.set()
        assert await asyncio.wait_for(close_handle, 1.0) is True
        await asyncio.wait_for(read_loop.task, 1.0)
        assert not read_loop.is_running

    asyncio.run(scenario())


def test_cancellation_interrupts_blocked_read():
    """A read that would never return does not keep the loop alive."""
    async def scenario():
        stream, lines, cancel_event, read_loop = await _open_loop()
        await asyncio.sleep(0.05)
        close_handle = read_loop.attach_close_handle()
        cancel_event.set()
        await asyncio.wait_for(close_handle, 0.5)

    asyncio.run(scenario())


def test_cancellation_interrupts_retry_pause():
    async def scenario():
        stream = MemoryStream()
        # never opened, so every read comes back empty and the loop pauses
        cancel_event = asyncio.Event()
        read_loop = ReadLoop(stream, LineFramer(), lambda line: None, cancel_event, retry_delay=30.0)
        read_loop.start()
        await asyncio.sleep(0.05)
        cancel_event.set()
        await asyncio.wait_for(read_loop.task, 0.5)

    asyncio.run(scenario())


def test_start_is_idempotent():
    async def scenario():
        stream, lines, cancel_event, read_loop = await _open_loop()
        assert read_loop.start() is read_loop.task
        cancel_event.set()
        await asyncio.wait_for(read_loop.task, 1.0)

    asyncio.run(scenario())
