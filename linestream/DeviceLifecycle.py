import asyncio
import logging
import threading

from .common import *

logger = logging.getLogger(__name__)

class DeviceLifecycle:
    """State machine driving a device through its open/close cycle.

    The lifecycle owns the session: the open stream, the session's
    cancellation event, and its read loop. It moves through
    `DeviceState.CLOSED` -> `OPENING` -> `OPEN` -> `CLOSING` -> `CLOSED` and
    may then start over. A single lock guards the state and session fields,
    and it is never held across an await, so a close waiting on the read loop
    can't deadlock against anything the loop does.

    The device supplies three hooks: `open_stream()` (coroutine returning the
    opened stream), `close_stream(stream)` (coroutine), and
    `start_loop(stream, cancel_event)` (returns a started `ReadLoop`)."""

    def __init__(self, open_stream, close_stream, start_loop):
        self.open_stream = open_stream
        self.close_stream = close_stream
        self.start_loop = start_loop

        # these attributes should only be read externally, not written
        self.state = DeviceState.CLOSED
        self.stream = None
        self.read_loop = None

        # these attributes are intended to be private
        self._lock = threading.Lock()
        self._cancel_event = None
        # cancel event of the session owning `stream` and `read_loop`
        self._session = None

    def __str__(self):
        return DeviceState.name_of(self.state)

    @property
    def is_open(self):
        return self.state == DeviceState.OPEN

    async def open(self):
        """Opens a new session.

        Does nothing if the device is already open, opening, or still closing
        a previous session. Otherwise the stream is opened (suspending until
        the transport is ready), the read loop is started, and the state
        becomes `OPEN`. If opening the stream fails, the state returns to
        `CLOSED` and the error propagates."""

        with self._lock:
            if self.state != DeviceState.CLOSED:
                logger.debug("open ignored, device is %s", self)
                return
            self.state = DeviceState.OPENING
            cancel_event = asyncio.Event()
            self._cancel_event = cancel_event

        try:
            stream = await self.open_stream()
        except BaseException:
            with self._lock:
                if self._cancel_event is cancel_event:
                    self._cancel_event = None
                    self.state = DeviceState.CLOSED
            raise

        with self._lock:
            # a close() or dispose() while we were opening ends this session
            abandoned = cancel_event.is_set() or self._cancel_event is not cancel_event
            if not abandoned:
                self.stream = stream
                self._session = cancel_event
            elif self._cancel_event is None:
                # nobody else is using the stream, release it before reopening is allowed
                self.state = DeviceState.CLOSING
            else:
                # a newer session already took the stream over
                stream = None

        if abandoned:
            if stream is not None:
                logger.debug("session closed while opening, releasing %s", stream)
                try:
                    await self.close_stream(stream)
                finally:
                    with self._lock:
                        if self._cancel_event is None:
                            self.state = DeviceState.CLOSED
            return

        read_loop = self.start_loop(stream, cancel_event)
        with self._lock:
            if self._session is cancel_event:
                self.read_loop = read_loop
            if self._cancel_event is cancel_event:
                self.state = DeviceState.OPEN

    async def close(self):
        """Closes the current session, if any.

        Signals cancellation, waits for the read loop to acknowledge it through
        its close handle, closes the stream, and returns the state to `CLOSED`.
        Completes immediately when there is no session, including a second
        close issued while the first is still in progress."""

        with self._lock:
            cancel_event = self._cancel_event
            if cancel_event is None:
                logger.debug("close ignored, device is %s", self)
                return
            self._cancel_event = None
            self.state = DeviceState.CLOSING
            read_loop = self.read_loop if self._session is cancel_event else None

        close_handle = None
        if read_loop is not None:
            close_handle = read_loop.attach_close_handle()
        cancel_event.set()

        if close_handle is not None:
            # the task finishing covers a loop that died without reaching its exit path
            await asyncio.wait([close_handle, read_loop.task], return_when=asyncio.FIRST_COMPLETED)
            _log_loop_failure(read_loop)

        with self._lock:
            # dispose() may have released this session's stream in the meantime
            stream = None
            if self._session is cancel_event:
                stream = self.stream
                self.stream = None
                self.read_loop = None
                self._session = None

        try:
            if stream is not None:
                await self.close_stream(stream)
        finally:
            with self._lock:
                if self._cancel_event is None:
                    self.state = DeviceState.CLOSED

    def dispose(self):
        """Tears the session down without waiting.

        Sets the cancellation event, then disposes of the stream right away
        instead of waiting for the read loop to notice. Safe to call any number
        of times from any state."""

        with self._lock:
            cancel_event = self._cancel_event
            stream = self.stream
            self._cancel_event = None
            self._session = None
            self.stream = None
            self.read_loop = None
            self.state = DeviceState.CLOSED

        if cancel_event is not None:
            cancel_event.set()

        if stream is not None:
            try:
                stream.dispose()
            except Exception as e:
                logger.warning("error disposing %s: %s", stream, e)

def _log_loop_failure(read_loop):
    task = read_loop.task
    if task.done() and not task.cancelled():
        error = task.exception()
        if error is not None:
            logger.error("read loop on %s failed: %r", read_loop.stream, error)
