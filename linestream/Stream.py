from .common import *
from .Exceptions import *

class Stream:
    """Base stream class to manage an asynchronous byte stream.

    This class represents the transport underneath a device: a serial port, a
    TCP socket, a captured log file, or anything else that produces bytes. It
    is fundamentally separate from the framing and parsing layers above it, and
    internally manages only reception and transmission of raw data.

    This class should not be used directly, but rather used as a base for child
    classes that use specific low-level communication drivers. As a minimum, a
    child class must implement the `open()`, `read()`, `close()`, and
    `dispose()` methods. Writable transports also implement `write()` and set
    `can_write`."""

    # true for transports that accept outgoing data
    can_write = False

    def __init__(self):
        """Initializes a stream instance.

        Streams are created closed. The owning device opens and closes them as
        its sessions start and end, possibly several times over the lifetime
        of the stream object."""

        # these attributes may be updated by the application
        self.on_open_stream = None
        self.on_close_stream = None
        self.on_rx_data = None
        self.on_tx_data = None

        # these attributes should only be read externally, not written
        self.is_open = False

    def __str__(self):
        """Generates the string representation of the stream.

        :returns: String representation of the stream
        :rtype: str

        Child classes should return something that identifies the underlying
        resource, such as a port name or network address."""

        return "unidentified stream"

    async def open(self) -> None:
        """Opens the stream.

        For example, a stream using pyserial-asyncio as the underlying driver
        would open the serial connection whenever this method is called.

        Since no driver is inherent in the base class, you *must* override this
        method in child classes so that a suitable action occurs. Opening a
        stream driven by nothing at all will generate an exception."""

        # child class must implement
        raise LinestreamHalException("Child class has not implemented open() method, cannot use base class stub")

    async def read(self, size) -> bytes:
        """Reads up to `size` bytes from the stream.

        :param size: Maximum number of bytes to return
        :type size: int

        :returns: Data read from the stream, empty if nothing was available or
            the end of the stream has been reached
        :rtype: bytes

        Implementations may suspend until data arrives. The device read loop
        cancels a pending read when its session is closed, so implementations
        must leave the stream in a usable state if `asyncio.CancelledError` is
        raised at the await point.

        Since no driver is inherent in the base class, you *must* override this
        method in child classes so that a suitable action occurs."""

        # child class must implement
        raise LinestreamHalException("Child class has not implemented read() method, cannot use base class stub")

    async def write(self, data) -> int:
        """Sends outgoing data to the stream.

        :param data: Data buffer to be sent out to the stream
        :type data: bytes

        :returns: Number of bytes written
        :rtype: int

        Read-only transports keep this default, which refuses the operation."""

        raise LinestreamNotSupportedException("%s does not support writing" % self.__class__.__name__)

    async def close(self) -> None:
        """Closes the stream.

        Graceful closure, waiting for the underlying driver to finish shutting
        the resource down where it supports that.

        Since no driver is inherent in the base class, you *must* override this
        method in child classes so that a suitable action occurs."""

        # child class must implement
        raise LinestreamHalException("Child class has not implemented close() method, cannot use base class stub")

    def dispose(self) -> None:
        """Releases the stream immediately.

        Synchronous, best-effort counterpart of `close()` used during teardown
        where blocking is not acceptable. Implementations must not raise.

        Since no driver is inherent in the base class, you *must* override this
        method in child classes so that a suitable action occurs."""

        # child class must implement
        raise LinestreamHalException("Child class has not implemented dispose() method, cannot use base class stub")

    def _on_open_stream(self):
        """Marks the stream open and triggers the application callback."""

        self.is_open = True
        if self.on_open_stream is not None:
            # trigger application callback
            self.on_open_stream(self)

    def _on_close_stream(self):
        """Marks the stream closed and triggers the application callback."""

        was_open = self.is_open
        self.is_open = False
        if was_open and self.on_close_stream is not None:
            # trigger application callback
            self.on_close_stream(self)

    def _on_rx_data(self, data):
        """Handles incoming data.

        :param data: Data buffer that has just been received
        :type data: bytes

        Child classes call this for every non-empty chunk they return from
        `read()`. This simple default implementation merely passes it to the
        application-level data RX callback, if one is defined."""

        if self.on_rx_data is not None:
            # trigger application callback
            self.on_rx_data(data, self)

    def _on_tx_data(self, data):
        """Handles outgoing data just before it is written."""

        if self.on_tx_data is not None:
            # trigger application callback
            self.on_tx_data(data, self)
