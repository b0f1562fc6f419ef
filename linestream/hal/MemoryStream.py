import asyncio

from ..Exceptions import *
from ..Stream import *

class MemoryStream(Stream):
    """In-memory loopback stream for tests and simulations.

    Incoming data is supplied by the application with `inject()` and handed
    out by `read()` in the same order, in pieces of at most the requested
    size. `inject_error()` makes a later read raise instead, which is handy
    for exercising how a device copes with a flaky transport. Everything
    written to the stream is collected in `written`."""

    can_write = True

    def __init__(self, name="memory"):
        super().__init__()
        self.name = name

        # these attributes should only be read externally, not written
        self.written = []
        self.open_count = 0
        self.close_count = 0

        # these attributes are intended to be private
        self._incoming = asyncio.Queue()
        self._partial = b""

    def __str__(self):
        return self.name

    def inject(self, data):
        """Queues data to be returned by upcoming reads.

        :param data: Incoming data, as bytes or text (encoded as UTF-8)
        :type data: bytes
        """

        if isinstance(data, str):
            data = data.encode("utf-8")
        self._incoming.put_nowait(bytes(data))

    def inject_error(self, error):
        """Queues an exception to be raised by an upcoming read.

        :param error: Exception instance to raise
        :type error: Exception
        """

        self._incoming.put_nowait(error)

    async def open(self) -> None:
        self.open_count += 1
        self._on_open_stream()

    async def read(self, size) -> bytes:
        if not self.is_open:
            return b""

        if not self._partial:
            item = await self._incoming.get()
            if isinstance(item, BaseException):
                raise item
            self._partial = item

        data, self._partial = self._partial[:size], self._partial[size:]
        self._on_rx_data(data)
        return data

    async def write(self, data) -> int:
        if not self.is_open:
            raise LinestreamHalException("cannot write to %s, stream is not open" % self)

        self._on_tx_data(data)
        self.written.append(bytes(data))
        return len(data)

    async def close(self) -> None:
        self.dispose()

    def dispose(self) -> None:
        if self.is_open:
            self.close_count += 1
            self._on_close_stream()
