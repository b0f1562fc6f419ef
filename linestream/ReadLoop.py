import asyncio
import logging

from .common import *

logger = logging.getLogger(__name__)

class ReadLoop:
    """Background task pumping bytes from a stream into a line framer.

    One read loop exists per open session. It reads chunks from the stream,
    feeds them to the framer, and hands each completed line to the `on_line`
    callback, until the session's cancellation event is set. Read errors are
    treated as "no data this time" so a flaky transport pauses the session
    instead of ending it; cancellation is the only way out of the loop.

    Whoever closes the session attaches a close handle (a future) before
    setting the cancellation event, and the loop fulfills that handle on its
    own exit path."""

    def __init__(self, stream, framer, on_line, cancel_event,
            chunk_size=DEFAULT_READ_CHUNK_SIZE, retry_delay=DEFAULT_READ_RETRY_DELAY):
        """Creates a read loop for one session.

        :param stream: Open stream to read from
        :type stream: Stream

        :param framer: Framer accumulating the session's pending text
        :type framer: LineFramer

        :param on_line: Callable receiving each complete line, in order
        :type on_line: callable

        :param cancel_event: The session's cancellation signal
        :type cancel_event: asyncio.Event

        :param chunk_size: Maximum number of bytes requested per read
        :type chunk_size: int

        :param retry_delay: Pause in seconds after an empty or failed read
        :type retry_delay: float
        """

        self.stream = stream
        self.framer = framer
        self.on_line = on_line
        self.cancel_event = cancel_event
        self.chunk_size = chunk_size
        self.retry_delay = retry_delay

        # these attributes should only be read externally, not written
        self.task = None
        self.close_handle = None

    @property
    def is_running(self):
        return self.task is not None and not self.task.done()

    def start(self):
        """Starts the loop as a task on the running event loop.

        :returns: The background task
        :rtype: asyncio.Task
        """

        if self.task is None:
            self.task = asyncio.get_running_loop().create_task(self.run())
        return self.task

    def attach_close_handle(self):
        """Creates the one-shot future the loop fulfills when it exits.

        :returns: Future resolved with True once the loop has stopped
        :rtype: asyncio.Future
        """

        if self.close_handle is None:
            self.close_handle = asyncio.get_running_loop().create_future()
        return self.close_handle

    async def run(self):
        """Reads, frames, and dispatches until cancelled."""

        logger.debug("read loop started on %s", self.stream)
        try:
            while not self.cancel_event.is_set():
                data = await self._read_chunk()

                # don't process anything that arrived after cancellation
                if self.cancel_event.is_set():
                    break

                if data:
                    for line in self.framer.feed(data):
                        self.on_line(line)
                else:
                    await self._pause()
        finally:
            logger.debug("read loop on %s stopped", self.stream)
            if self.close_handle is not None and not self.close_handle.done():
                self.close_handle.set_result(True)

    async def _read_chunk(self):
        """Reads one chunk, racing the read against cancellation.

        :returns: Data read, or empty bytes on cancellation or read error
        :rtype: bytes
        """

        read_task = asyncio.ensure_future(self.stream.read(self.chunk_size))
        cancel_task = asyncio.ensure_future(self.cancel_event.wait())
        try:
            await asyncio.wait([read_task, cancel_task], return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancel_task.cancel()
            if not read_task.done():
                read_task.cancel()
                read_task.add_done_callback(_discard_outcome)

        if not read_task.done() or read_task.cancelled():
            return b""

        error = read_task.exception()
        if error is not None:
            # transient transport failure, try again after the retry delay
            logger.debug("read from %s failed: %r", self.stream, error)
            return b""

        return read_task.result()

    async def _pause(self):
        """Waits out the retry delay, returning early if cancelled."""

        try:
            await asyncio.wait_for(self.cancel_event.wait(), timeout=self.retry_delay)
        except asyncio.TimeoutError:
            pass

def _discard_outcome(task):
    # retrieve whatever an abandoned read ended with so asyncio doesn't warn
    if not task.cancelled():
        task.exception()
