import asyncio
import logging

from ..Exceptions import *
from ..Stream import *

logger = logging.getLogger(__name__)

class ReaderWriterStream(Stream):
    """Base class for streams built on an asyncio reader/writer pair.

    Both serial connections from pyserial-asyncio and TCP connections from
    `asyncio.open_connection()` come as a `StreamReader` plus `StreamWriter`.
    This class implements reading, writing, and closing on top of that pair;
    child classes only implement `_connect()` to create it."""

    can_write = True

    def __init__(self):
        super().__init__()

        # these attributes are intended to be private
        self._reader = None
        self._writer = None

    async def _connect(self):
        """Creates the reader/writer pair.

        :returns: Tuple of `(asyncio.StreamReader, asyncio.StreamWriter)`
        :rtype: tuple

        Since no driver is inherent in the base class, you *must* override this
        method in child classes."""

        # child class must implement
        raise LinestreamHalException("Child class has not implemented _connect() method, cannot use base class stub")

    async def open(self) -> None:
        """Opens the connection if it is not already open."""

        # don't open if we're already open
        if not self.is_open:
            self._reader, self._writer = await self._connect()
            self._on_open_stream()

    async def read(self, size) -> bytes:
        if self._reader is None:
            return b""

        data = await self._reader.read(size)
        if data:
            self._on_rx_data(data)
        return data

    async def write(self, data) -> int:
        if self._writer is None:
            raise LinestreamHalException("cannot write to %s, stream is not open" % self)

        self._on_tx_data(data)
        self._writer.write(data)
        await self._writer.drain()
        return len(data)

    async def close(self) -> None:
        """Closes the connection if it is currently open."""

        writer = self._release()
        if writer is None:
            return

        try:
            writer.close()
            await writer.wait_closed()
        except OSError as e:
            # the other end may already be gone
            logger.warning("error closing %s: %s", self, e)
        finally:
            self._on_close_stream()

    def dispose(self) -> None:
        writer = self._release()
        if writer is None:
            return

        try:
            writer.close()
        except (OSError, RuntimeError) as e:
            logger.warning("error disposing %s: %s", self, e)
        finally:
            self._on_close_stream()

    def _release(self):
        writer = self._writer
        self._reader = None
        self._writer = None
        return writer
