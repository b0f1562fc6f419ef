import logging

from .common import *
from .Exceptions import *
from .DeviceLifecycle import *
from .LineFramer import *
from .ReadLoop import *

logger = logging.getLogger(__name__)

class Device:
    """Base device class representing one line-oriented stream endpoint.

    A device ties together a stream (the transport), a line framer, a message
    parser, and a background read loop. Once opened, every line arriving on
    the stream is parsed and the resulting message is delivered to the
    device's subscribers, in the order the lines were received. Lines the
    parser rejects are dropped silently, and transport read errors only pause
    the flow of data; neither ends the session.

    This base class is read-only. Devices that can send data to the stream
    should derive from `StreamDevice` (or override `can_write` and `write()`
    themselves)."""

    # these class attributes provide defaults for new instances
    default_separator = DEFAULT_SEPARATOR
    encoding = DEFAULT_ENCODING
    read_chunk_size = DEFAULT_READ_CHUNK_SIZE
    read_retry_delay = DEFAULT_READ_RETRY_DELAY

    def __init__(self, stream, parser, id=None, separator=None):
        """Initializes a device instance.

        :param stream: Stream the device reads from (and possibly writes to)
        :type stream: Stream

        :param parser: Parser turning each incoming line into a message
        :type parser: MessageParser

        :param id: An identifier given to this device, such as the port it is
            attached to; the stream's name is used if omitted
        :type id: str

        :param separator: Text that terminates each incoming message, newline
            unless specified
        :type separator: str

        The stream is not opened here. Call `open()` (or use the device as an
        async context manager) to start receiving messages."""

        # these attributes may be updated by the application
        self.id = id
        self.stream = stream
        self.parser = parser
        self.on_rx_message = None

        # these attributes are intended to be private
        self._framer = LineFramer(
                separator=separator if separator is not None else self.default_separator,
                encoding=self.encoding)
        self._subscribers = []
        self._lifecycle = DeviceLifecycle(self._open_stream, self._close_stream, self._start_read_loop)

    def __str__(self):
        """Generates the string representation of the device.

        :returns: String representation of the device
        :rtype: str

        Uses the ID if one was given, otherwise the representation of the
        attached stream."""

        return str(self.id) if self.id is not None else str(self.stream)

    async def __aenter__(self):
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    @property
    def incoming_message_separator(self):
        return self._framer.separator

    @incoming_message_separator.setter
    def incoming_message_separator(self, value):
        self._framer.separator = value

    @property
    def state(self):
        return self._lifecycle.state

    @property
    def is_open(self):
        return self._lifecycle.is_open

    @property
    def can_write(self):
        return False

    async def open(self):
        """Opens the device and starts receiving messages.

        Calling this while the device is open, opening, or still closing
        does nothing. Errors raised by the stream while opening propagate to
        the caller, leaving the device closed."""

        await self._lifecycle.open()

    async def close(self):
        """Closes the device.

        Waits for the read loop to stop, then closes the stream. Calling this
        on a device that is not open does nothing."""

        await self._lifecycle.close()

    def write(self, buffer, offset=0, length=None):
        """Writes to the device stream.

        :param buffer: Data to send
        :type buffer: bytes

        :param offset: Position in `buffer` of the first byte to send
        :type offset: int

        :param length: Number of bytes to send, the rest of `buffer` if omitted
        :type length: int

        :returns: Awaitable completing once the data is written

        Check `can_write` before calling this method. On a read-only device
        this raises `LinestreamNotSupportedException` immediately, before any
        awaitable is created."""

        raise LinestreamNotSupportedException("%s does not support writing" % self)

    def dispose(self):
        """Releases the device without waiting.

        Signals the read loop to stop and disposes of the stream right away.
        Use `close()` where you can await; this is for teardown paths that
        can't. Safe to call repeatedly and in any state."""

        self._lifecycle.dispose()

    def subscribe(self, callback):
        """Registers a callable to receive parsed messages.

        :param callback: Callable accepting `(message, device)`
        :type callback: callable
        """

        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback):
        """Removes a callable previously passed to `subscribe()`."""

        try:
            self._subscribers.remove(callback)
        except ValueError:
            # not subscribed
            pass

    async def _open_stream(self):
        """Opens the stream at the start of a session.

        :returns: The stream to read from for this session
        :rtype: Stream

        Child classes may override this to create or configure the stream on
        demand. Any partial line left over from a previous session is
        discarded first."""

        self._framer.reset()
        await self.stream.open()
        logger.info("opened %s", self)
        return self.stream

    async def _close_stream(self, stream):
        """Closes the stream at the end of a session."""

        await stream.close()
        logger.info("closed %s", self)

    def _start_read_loop(self, stream, cancel_event):
        read_loop = ReadLoop(stream, self._framer, self._on_rx_line, cancel_event,
                chunk_size=self.read_chunk_size, retry_delay=self.read_retry_delay)
        read_loop.start()
        return read_loop

    def _on_rx_line(self, line):
        """Handles a complete incoming line.

        :param line: Framed and trimmed line of text
        :type line: str

        The line is parsed and the message delivered to subscribers. A line
        the parser rejects is dropped without any notification."""

        try:
            message = self.parser.parse(line)
        except Exception as e:
            logger.debug("dropped line %r from %s: %s", line, self, e)
            return

        if message is not None:
            self._on_rx_message(message)

    def _on_rx_message(self, message):
        """Delivers a parsed message to the application.

        :param message: Object returned by the parser

        A subscriber that raises is logged and skipped, so one faulty
        callback can't stop the others or the read loop."""

        callbacks = list(self._subscribers)
        if self.on_rx_message is not None:
            callbacks.insert(0, self.on_rx_message)

        for callback in callbacks:
            try:
                # trigger application callback
                callback(message, self)
            except Exception:
                logger.exception("message callback failed on %s", self)
