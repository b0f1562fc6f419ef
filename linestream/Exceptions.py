"""Linestream Exception Definitions

Every error raised by the library itself derives from `LinestreamException`.
Errors coming straight from the operating system or a driver, such as
`FileNotFoundError` when a capture file is missing, are passed through as-is.
"""

class LinestreamException(Exception):
    """Common base of the linestream errors

    Catch this to handle any of the errors below in one place. The library
    only ever raises one of the subclasses.
    """

    pass

class LinestreamHalException(LinestreamException):
    """Transport could not be opened or used

    Raised when a serial port or TCP connection fails to open, when awaiting a
    write on a device that is not open, and by the `Stream` base methods that a
    transport class forgot to override.
    """

    pass

class LinestreamProtocolException(LinestreamException):
    """A line of text is not a valid message

    Parsers raise this from `parse()`. The device logs it, drops that one line,
    and keeps reading.
    """

    pass

class LinestreamNotSupportedException(LinestreamException):
    """Operation not available on this device or stream

    Raised by `write()` on a device or stream with `can_write` false, at call
    time rather than when awaited.
    """

    pass
