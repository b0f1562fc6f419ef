"""Prints every line received from a serial port or TCP endpoint.

Usage:
    python text_demo.py /dev/ttyUSB0 [baudrate]
    python text_demo.py tcp://192.168.1.50:4001
"""

import asyncio
import logging
import sys
import time

import linestream
import linestream.hal

class App():

    def __init__(self, target, baudrate=9600):
        if target.startswith("tcp://"):
            host, port = target[len("tcp://"):].rsplit(":", 1)
            stream = linestream.hal.TcpStream(host, int(port), connect_timeout=5.0)
        else:
            stream = linestream.hal.UartStream(target, baudrate)

        # set up device (handles incoming data and message parsing)
        self.device = linestream.StreamDevice(stream, linestream.TextLineParser())
        self.device.on_rx_message = self.on_rx_message
        stream.on_open_stream = self.on_open_stream
        stream.on_close_stream = self.on_close_stream

    def on_open_stream(self, stream):
        print("[%.03f] OPENED: %s" % (time.time(), stream))

    def on_close_stream(self, stream):
        print("[%.03f] CLOSED: %s" % (time.time(), stream))

    def on_rx_message(self, message, device):
        print("[%.03f] RXM: %s" % (message.timestamp, message))

    async def run(self):
        async with self.device:
            # run until interrupted
            await asyncio.Event().wait()

def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    logging.basicConfig(level=logging.INFO, format="[%(levelname)-7s] %(asctime)s %(name)s: %(message)s")
    baudrate = int(sys.argv[2]) if len(sys.argv) > 2 else 9600
    app = App(sys.argv[1], baudrate)
    asyncio.run(app.run())

if __name__ == '__main__':
    try:
        main()
    except KeyboardInterrupt:
        print("Ctrl+C detected, terminating script")
        sys.exit(0)
