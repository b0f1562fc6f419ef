import asyncio
import logging

from ..Stream import *

logger = logging.getLogger(__name__)

class FileStream(Stream):
    """Read-only stream replaying bytes from a file.

    Useful for running a parser against a captured session log exactly as if
    the data were arriving from the device. File reads run in a worker thread
    so they never block the event loop. At the end of the file every read
    returns no data, which the device treats like an idle transport."""

    def __init__(self, path):
        """Initializes a file stream instance.

        :param path: Path of the file to replay
        :type path: str or os.PathLike
        """

        super().__init__()
        self.path = path

        # these attributes are intended to be private
        self._file = None

    def __str__(self):
        return str(self.path)

    async def open(self) -> None:
        # don't open if we're already open
        if not self.is_open:
            self._file = await asyncio.to_thread(open, self.path, "rb")
            self._on_open_stream()

    async def read(self, size) -> bytes:
        if self._file is None:
            return b""

        data = await asyncio.to_thread(self._file.read, size)
        if data:
            self._on_rx_data(data)
        return data

    async def close(self) -> None:
        self.dispose()

    def dispose(self) -> None:
        file = self._file
        self._file = None
        if file is None:
            return

        try:
            file.close()
        except OSError as e:
            logger.warning("error closing %s: %s", self, e)
        finally:
            self._on_close_stream()
