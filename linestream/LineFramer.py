import codecs
import threading

from .common import *

class LineFramer:
    """Accumulates raw bytes and splits them into lines of text.

    Incoming data is decoded and appended to a pending text buffer, which is
    then cut at every occurrence of the separator. Each cut segment has its
    surrounding whitespace removed and is returned unless that leaves it empty.
    Whatever follows the last separator stays buffered until a later `feed()`
    completes it, so lines (and separators) may be split across any number of
    reads."""

    def __init__(self, separator=DEFAULT_SEPARATOR, encoding=DEFAULT_ENCODING):
        """Creates a new line framer.

        :param separator: Text marking the end of each line
        :type separator: str

        :param encoding: Text encoding of the incoming byte stream
        :type encoding: str
        """

        self.separator = separator
        self.encoding = encoding

        # these attributes are intended to be private
        self._lock = threading.Lock()
        self._buffer = ""
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    @property
    def separator(self):
        return self._separator

    @separator.setter
    def separator(self, value):
        # a new separator applies from the next feed() onward
        if not value:
            raise ValueError("line separator must be a non-empty string")
        self._separator = value

    @property
    def pending(self):
        """Text received but not yet terminated by a separator."""

        with self._lock:
            return self._buffer

    def reset(self):
        """Discards any buffered partial line and decoder state."""

        with self._lock:
            self._buffer = ""
            self._decoder.reset()

    def feed(self, data):
        """Adds incoming data and extracts all complete lines.

        :param data: Raw bytes just read from the stream
        :type data: bytes

        :returns: Complete lines in the order they appeared in the stream
        :rtype: list
        """

        lines = []
        with self._lock:
            # multi-byte characters split across reads stay in the decoder
            self._buffer += self._decoder.decode(bytes(data))
            separator = self._separator

            line_end = self._buffer.find(separator)
            while line_end > -1:
                line = self._buffer[:line_end].strip()
                self._buffer = self._buffer[line_end + len(separator):]
                if line:
                    lines.append(line)
                line_end = self._buffer.find(separator)

        return lines
