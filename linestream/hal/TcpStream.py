import asyncio

from ..Exceptions import *
from .ReaderWriterStream import *

class TcpStream(ReaderWriterStream):
    """TCP client stream, for devices reachable over the network.

    Serial-to-Ethernet bridges, NTRIP casters, and instrument servers usually
    speak the same line-oriented text over a plain TCP socket as they would
    over a UART."""

    def __init__(self, host, port, connect_timeout=None):
        """Initializes a TCP stream instance.

        :param host: Remote host name or address
        :type host: str

        :param port: Remote TCP port
        :type port: int

        :param connect_timeout: Seconds to wait for the connection, or None to
            wait as long as the operating system does
        :type connect_timeout: float
        """

        super().__init__()
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout

    def __str__(self):
        return "%s:%d" % (self.host, self.port)

    async def _connect(self):
        try:
            return await asyncio.wait_for(
                    asyncio.open_connection(self.host, self.port), timeout=self.connect_timeout)
        except (OSError, asyncio.TimeoutError) as e:
            raise LinestreamHalException("unable to connect to %s: %r" % (self, e)) from e
