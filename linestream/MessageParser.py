import time

from .Exceptions import *

class MessageParser:
    """Base parser class turning one framed line of text into a message.

    Devices hand every complete, trimmed, non-empty line to `parse()`. The
    returned object is delivered to subscribers as-is; the device imposes no
    structure on it. Returning `None` means the line produced no message and
    nothing is delivered.

    To reject a line, raise `LinestreamProtocolException`. The device drops
    the line silently and continues with the next one (in fact any exception
    is treated this way, but the protocol exception is the documented one)."""

    def parse(self, line):
        """Parse a single line of text.

        :param line: Framed line with surrounding whitespace removed
        :type line: str

        :returns: Message object, or None if the line yields no message

        Since no message format is inherent in the base class, you *must*
        override this method in child classes."""

        # child class must implement
        raise LinestreamProtocolException("Child class has not implemented parse() method, cannot use base class stub")

class TextLine:
    """Plain text message produced by `TextLineParser`."""

    def __init__(self, text, timestamp=None):
        self.text = text
        self.timestamp = time.time() if timestamp is None else timestamp

    def __str__(self):
        return self.text

    def __repr__(self):
        return "TextLine(%r)" % self.text

    def __eq__(self, other):
        if not isinstance(other, TextLine):
            return NotImplemented
        return self.text == other.text

    def __hash__(self):
        return hash(self.text)

class TextLineParser(MessageParser):
    """Parser that accepts every line as a `TextLine` message.

    Useful for line-oriented consoles and logging devices where the text
    itself is the payload, and as a starting point for subclasses that only
    need to inspect the text before deciding what to emit."""

    def parse(self, line):
        return TextLine(line)

class CallbackParser(MessageParser):
    """Adapter that uses a plain callable as the parser.

    :param func: Callable accepting a line and returning a message (or None)
    :type func: callable

    Handy for one-off formats, e.g. `CallbackParser(json.loads)`."""

    def __init__(self, func):
        self.func = func

    def parse(self, line):
        return self.func(line)
