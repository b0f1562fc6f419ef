from .Device import *

class StreamDevice(Device):
    """Stream device class for endpoints that accept outgoing data.

    Identical to `Device` for incoming messages, and additionally routes
    `write()` calls to the attached stream. Use it with a writable transport
    such as `UartStream` or `TcpStream`, e.g. for sending commands or
    correction data to a receiver while its output is being parsed. Wrapping
    a read-only transport such as `FileStream` gives a device that reports
    `can_write` as false and refuses writes like a plain `Device`."""

    @property
    def can_write(self):
        return self.stream.can_write

    def write(self, buffer, offset=0, length=None):
        """Writes to the device stream.

        :param buffer: Data to send
        :type buffer: bytes

        :param offset: Position in `buffer` of the first byte to send
        :type offset: int

        :param length: Number of bytes to send, the rest of `buffer` if omitted
        :type length: int

        :returns: Awaitable resolving to the number of bytes written

        Raises `LinestreamNotSupportedException` immediately if the stream is
        read-only, `ValueError` immediately for an out-of-range slice, and
        `LinestreamHalException` when awaited if the device isn't open."""

        if not self.can_write:
            return super().write(buffer, offset, length)

        if offset < 0 or offset > len(buffer):
            raise ValueError("offset %d outside buffer of %d bytes" % (offset, len(buffer)))
        if length is None:
            length = len(buffer) - offset
        if length < 0 or offset + length > len(buffer):
            raise ValueError("length %d from offset %d exceeds buffer of %d bytes" % (length, offset, len(buffer)))

        return self._write(bytes(buffer[offset:offset + length]))

    async def _write(self, data):
        stream = self._lifecycle.stream
        if not self.is_open or stream is None:
            raise LinestreamHalException("cannot write to %s, device is not open" % self)

        return await stream.write(data)
