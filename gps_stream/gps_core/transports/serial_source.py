"""Blocking pyserial byte source for GPS receivers.

Wraps ``serial.Serial`` so the framer can pull raw bytes from a UART or USB
receiver. All line settings (baud rate, byte size, parity, stop bits, read
timeout) live here; the framer never sees them.
"""

from __future__ import annotations

from typing import Optional

import serial

from gps_stream.core.logging_utils import get_module_logger

from ..constants import (
    DEFAULT_BAUD_RATE,
    DEFAULT_BYTESIZE,
    DEFAULT_PARITY,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_STOPBITS,
)

logger = get_module_logger("SerialByteSource")


class SerialByteSource:
    """ByteStreamSource backed by a pyserial port.

    Example:
        with SerialByteSource("/dev/ttyUSB0", 9600) as source:
            reader = GPSReader(source)
            for record in reader.records():
                print(record)
    """

    def __init__(
        self,
        port: str,
        baudrate: int = DEFAULT_BAUD_RATE,
        *,
        bytesize: int = DEFAULT_BYTESIZE,
        parity: str = DEFAULT_PARITY,
        stopbits: float = DEFAULT_STOPBITS,
        timeout: Optional[float] = DEFAULT_READ_TIMEOUT,
    ):
        """Initialize the source without opening the port.

        Args:
            port: Serial port path (e.g., '/dev/serial0' or 'COM3')
            baudrate: Serial baudrate (default 9600 for most GPS)
            bytesize: Data bits per character
            parity: pyserial parity code ('N', 'E', 'O', 'M', 'S')
            stopbits: 1, 1.5 or 2
            timeout: Read timeout in seconds; None blocks until size bytes arrive
        """
        self.port = port
        self.baudrate = baudrate
        self.bytesize = bytesize
        self.parity = parity
        self.stopbits = stopbits
        self.timeout = timeout
        self._serial: Optional[serial.Serial] = None
        self._last_error: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self._serial is not None and self._serial.is_open

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def open(self) -> None:
        """Open the port. Raises serial.SerialException on failure."""
        if self.is_open:
            logger.debug("Already connected to %s", self.port)
            return
        try:
            self._serial = serial.Serial(
                port=self.port,
                baudrate=self.baudrate,
                bytesize=self.bytesize,
                parity=self.parity,
                stopbits=self.stopbits,
                timeout=self.timeout,
            )
        except serial.SerialException as exc:
            self._last_error = str(exc)
            logger.warning("Failed to open %s at %d baud: %s", self.port, self.baudrate, exc)
            raise
        self._last_error = None
        logger.info("Connected to GPS on %s at %d baud", self.port, self.baudrate)

    def close(self) -> None:
        if self._serial is None:
            return
        port, self._serial = self._serial, None
        port.close()
        logger.info("Disconnected from GPS on %s", self.port)

    def read(self, size: int) -> Optional[bytes]:
        """Read up to ``size`` bytes; b"" on timeout, None once closed or failed."""
        if not self.is_open:
            return None
        try:
            waiting = self._serial.in_waiting
            # Wait (up to the timeout) for one byte when nothing is queued
            return self._serial.read(min(size, waiting) if waiting else 1)
        except serial.SerialException as exc:
            self._last_error = str(exc)
            logger.warning("Read error on %s: %s", self.port, exc)
            self.close()
            return None

    def __enter__(self) -> "SerialByteSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_gps_port(port: str, baudrate: int = DEFAULT_BAUD_RATE, **kwargs) -> SerialByteSource:
    """Open a receiver port with a one second read timeout and return it."""
    kwargs.setdefault("timeout", DEFAULT_READ_TIMEOUT)
    source = SerialByteSource(port, baudrate, **kwargs)
    source.open()
    return source
