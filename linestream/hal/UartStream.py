import serial
import serial.tools.list_ports
import serial_asyncio

from ..Exceptions import *
from .ReaderWriterStream import *

class UartStream(ReaderWriterStream):
    """Serial stream class providing a bidirectional data stream to a serial device.

    This class allows reading from and writing to a serial device, using
    pyserial-asyncio (and PySerial underneath) as the low-level driver. The
    port is opened when the owning device opens and released when it closes,
    so the same stream object can be reopened any number of times."""

    def __init__(self, url, baudrate=9600, port_info=None, **serial_kwargs):
        """Initializes a serial stream instance.

        :param url: Port name or PySerial URL (e.g. `/dev/ttyUSB0`, `COM3`,
            `socket://host:port`, `loop://`)
        :type url: str

        :param baudrate: Serial baud rate
        :type baudrate: int

        :param port_info: PySerial ListPortInfo describing the port, if known
        :type port_info: serial.tools.list_ports_common.ListPortInfo

        Any other keyword arguments (`bytesize`, `parity`, `stopbits`,
        `rtscts`, ...) are passed through to PySerial when the port opens."""

        super().__init__()
        self.url = url
        self.baudrate = baudrate
        self.port_info = port_info
        self.serial_kwargs = serial_kwargs

    def __str__(self):
        """Generates the string representation of the serial stream.

        :returns: String representation of the stream
        :rtype: str
        """

        return self.port_info.device if self.port_info is not None else self.url

    @classmethod
    def list_ports(cls, port_info_filter=None, **kwargs):
        """Creates streams for the serial ports currently present.

        :param port_info_filter: Callable receiving each PySerial ListPortInfo
            and returning whether the port should be included
        :type port_info_filter: callable

        :returns: Dictionary of unopened streams keyed by port device name
        :rtype: dict

        Extra keyword arguments are passed to each stream's constructor, e.g.
        `UartStream.list_ports(lambda p: p.vid == 0x2341, baudrate=115200)`."""

        streams = {}
        for port_info in serial.tools.list_ports.comports():
            # apply filter, skip if it doesn't pass
            if port_info_filter is not None and not port_info_filter(port_info):
                continue

            streams[port_info.device] = cls(port_info.device, port_info=port_info, **kwargs)

        return streams

    async def _connect(self):
        try:
            return await serial_asyncio.open_serial_connection(
                    url=self.url, baudrate=self.baudrate, **self.serial_kwargs)
        except serial.serialutil.SerialException as e:
            raise LinestreamHalException("unable to open serial port %s: %s" % (self, e)) from e
