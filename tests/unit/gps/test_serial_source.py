"""Unit tests for the pyserial and replay byte sources."""

import io
from unittest.mock import MagicMock, patch

import pytest
import serial

from gps_stream.gps_core.parsers.nmea_types import GpsRecord
from gps_stream.gps_core.reader import GPSReader
from gps_stream.gps_core.transports import (
    ByteStreamSource,
    ReplayByteSource,
    SerialByteSource,
    open_gps_port,
)

SERIAL_CLASS = "gps_stream.gps_core.transports.serial_source.serial.Serial"


class TestSerialByteSourceInit:

    def test_default_values(self):
        source = SerialByteSource("/dev/serial0")

        assert source.port == "/dev/serial0"
        assert source.baudrate == 9600
        assert source.timeout == 1.0
        assert source.is_open is False
        assert source.last_error is None

    def test_satisfies_protocol(self):
        assert isinstance(SerialByteSource("/dev/serial0"), ByteStreamSource)
        assert isinstance(ReplayByteSource(b""), ByteStreamSource)


class TestSerialByteSourceOpen:

    def test_open_passes_line_settings(self, mock_serial_device):
        with patch(SERIAL_CLASS, return_value=mock_serial_device) as serial_cls:
            source = SerialByteSource("/dev/ttyUSB0", 4800, parity="E", stopbits=2, timeout=0.5)
            source.open()

        serial_cls.assert_called_once_with(
            port="/dev/ttyUSB0",
            baudrate=4800,
            bytesize=8,
            parity="E",
            stopbits=2,
            timeout=0.5,
        )
        assert source.is_open is True

    def test_open_failure(self):
        with patch(SERIAL_CLASS, side_effect=serial.SerialException("could not open port")):
            source = SerialByteSource("/dev/ttyMISSING")
            with pytest.raises(serial.SerialException):
                source.open()

        assert source.is_open is False
        assert "could not open port" in source.last_error

    def test_context_manager(self, mock_serial_device):
        with patch(SERIAL_CLASS, return_value=mock_serial_device):
            with SerialByteSource("/dev/ttyUSB0") as source:
                assert source.is_open is True

        assert mock_serial_device.is_open is False
        assert source.is_open is False

    def test_open_gps_port(self, mock_serial_device):
        with patch(SERIAL_CLASS, return_value=mock_serial_device) as serial_cls:
            source = open_gps_port("/dev/ttyUSB0", 38400)

        assert source.is_open is True
        assert serial_cls.call_args.kwargs["baudrate"] == 38400
        assert serial_cls.call_args.kwargs["timeout"] == 1.0


class TestSerialByteSourceRead:

    def test_read_limited_to_size(self, mock_serial_device, rmc_sentence):
        mock_serial_device.queue_bytes(rmc_sentence)
        with patch(SERIAL_CLASS, return_value=mock_serial_device):
            source = SerialByteSource("/dev/ttyUSB0")
            source.open()

        assert source.read(16) == rmc_sentence[:16]
        assert source.read(256) == rmc_sentence[16:]
        assert mock_serial_device.read_sizes == [16, len(rmc_sentence) - 16]

    def test_idle_read_waits_for_one_byte(self, mock_serial_device):
        with patch(SERIAL_CLASS, return_value=mock_serial_device):
            source = SerialByteSource("/dev/ttyUSB0")
            source.open()

        assert source.read(256) == b""
        assert mock_serial_device.read_sizes == [1]

    def test_read_when_closed(self):
        assert SerialByteSource("/dev/ttyUSB0").read(256) is None

    def test_read_error_closes(self, mock_serial_device):
        mock_serial_device.read = MagicMock(side_effect=serial.SerialException("device disconnected"))
        with patch(SERIAL_CLASS, return_value=mock_serial_device):
            source = SerialByteSource("/dev/ttyUSB0")
            source.open()

        assert source.read(256) is None
        assert source.is_open is False
        assert source.last_error == "device disconnected"

    def test_reader_over_serial(self, mock_gps_device):
        with patch(SERIAL_CLASS, return_value=mock_gps_device):
            source = SerialByteSource("/dev/serial0")
            source.open()

        reader = GPSReader(source, poll_interval=0)
        records = []
        for _ in range(20):
            outcome = reader.poll()
            if isinstance(outcome, GpsRecord):
                records.append(outcome)

        assert [record.tag for record in records] == ["GPGGA", "GPRMC", "GPVTG", "GPGSA"]

        source.close()
        assert list(reader.records()) == []
        assert reader.finished is True


class TestReplayByteSource:

    def test_bytes(self, sample_stream):
        source = ReplayByteSource(sample_stream, chunk_size=10)

        assert source.read(256) == sample_stream[:10]
        assert source.read(4) == sample_stream[10:14]

    def test_end_of_stream(self):
        source = ReplayByteSource(b"abc")

        assert source.read(256) == b"abc"
        assert source.read(256) is None
        assert source.exhausted is True
        assert source.read(256) is None

    def test_file_is_closed_at_end(self, nmea_capture, sample_stream):
        source = ReplayByteSource.from_path(nmea_capture)
        data = b""
        chunk = source.read(64)
        while chunk is not None:
            data += chunk
            chunk = source.read(64)

        assert data == sample_stream
        assert source._stream.closed is True

    def test_borrowed_stream_left_open(self):
        stream = io.BytesIO(b"$GPTXT\r\n")
        with ReplayByteSource(stream) as source:
            while source.read(256) is not None:
                pass

        assert stream.closed is False
