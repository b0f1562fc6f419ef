"""
This module provides stream implementations for concrete transports: serial
ports (via pyserial-asyncio), TCP connections, replayed capture files, and an
in-memory loopback stream for tests and simulations.
"""

# .py files
from .ReaderWriterStream import *
from .UartStream import *
from .TcpStream import *
from .FileStream import *
from .MemoryStream import *
