"""Tests for writable stream devices."""

import asyncio

import pytest

from linestream import LinestreamHalException, LinestreamNotSupportedException, StreamDevice, TextLineParser
from linestream.hal import FileStream, MemoryStream


def test_can_write():
    device = StreamDevice(MemoryStream(), TextLineParser())
    assert device.can_write


def test_read_only_stream_refuses_writes(tmp_path):
    capture = tmp_path / "capture.log"
    capture.write_bytes(b"$GPGGA,1*00\r\n")

    async def scenario():
        device = StreamDevice(FileStream(capture), TextLineParser())
        assert not device.can_write
        await device.open()
        with pytest.raises(LinestreamNotSupportedException):
            device.write(b"$PMTK220,1000*1F\r\n")
        await device.close()

    asyncio.run(scenario())


def test_write_routes_to_stream():
    async def scenario():
        device = StreamDevice(MemoryStream(), TextLineParser())
        await device.open()
        written = await device.write(b"$PMTK314,0,1,0*28\r\n")
        await device.write(b"xxHELLOxx", 2, 5)
        await device.write(bytearray(b"tail\n"), 2)
        await device.close()
        return device.stream.written, written

    chunks, count = asyncio.run(scenario())
    assert chunks == [b"$PMTK314,0,1,0*28\r\n", b"HELLO", b"il\n"]
    assert count == 19


def test_tx_callback_sees_outgoing_data():
    async def scenario():
        stream = MemoryStream()
        seen = []
        stream.on_tx_data = lambda data, s: seen.append(data)
        device = StreamDevice(stream, TextLineParser())
        await device.open()
        await device.write(b"cmd\n")
        await device.close()
        return seen

    assert asyncio.run(scenario()) == [b"cmd\n"]


def test_write_requires_open_device():
    async def scenario():
        device = StreamDevice(MemoryStream(), TextLineParser())
        with pytest.raises(LinestreamHalException):
            await device.write(b"too early\n")

        await device.open()
        await device.close()
        with pytest.raises(LinestreamHalException):
            await device.write(b"too late\n")
        assert device.stream.written == []

    asyncio.run(scenario())


@pytest.mark.parametrize("offset, length", [(-1, None), (10, None), (0, 6), (3, -1)])
def test_write_rejects_out_of_range_slice(offset, length):
    device = StreamDevice(MemoryStream(), TextLineParser())
    with pytest.raises(ValueError):
        device.write(b"abcde", offset, length)


def test_reads_and_writes_in_same_session():
    async def scenario():
        device = StreamDevice(MemoryStream(), TextLineParser())
        replies = []
        device.subscribe(lambda message, dev: replies.append(message.text))
        await device.open()
        await device.write(b"*IDN?\n")
        device.stream.inject(b"ACME,PSU-3005,1234,1.0\n")
        for _ in range(200):
            if replies:
                break
            await asyncio.sleep(0.01)
        await device.close()
        return replies, device.stream.written

    replies, written = asyncio.run(scenario())
    assert replies == ["ACME,PSU-3005,1234,1.0"]
    assert written == [b"*IDN?\n"]
