"""
Linestream is a library for line-oriented asynchronous stream devices: serial
ports, TCP endpoints, captured logs, or anything else that delivers text one
separator-terminated message at a time.

A device opens its stream, continuously reads from it in a background asyncio
task, splits the incoming bytes into lines, hands each line to a pluggable
message parser, and delivers the parsed messages to subscribers. Transport
implementations live in the `hal` submodule.

Note that linestream requires Python 3.x with asyncio, and will not work in
2.x.
"""

# .py files
from .common import *
from .Exceptions import *

from .Stream import *
from .MessageParser import *
from .LineFramer import *
from .ReadLoop import *
from .DeviceLifecycle import *
from .Device import *
from .StreamDevice import *

# submodule folders
from . import hal
