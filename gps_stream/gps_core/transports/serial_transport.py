"""asyncio serial transport for GPS receivers.

Async counterpart of :mod:`serial_source`, built on pyserial-asyncio. It
only moves bytes: ``read_chunk`` hands back whatever the UART produced and
:func:`gps_stream.gps_core.reader.async_records` frames it.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Optional

import serial
import serial_asyncio

from gps_stream.core.logging_utils import get_module_logger

from ..constants import (
    DEFAULT_BAUD_RATE,
    DEFAULT_BYTESIZE,
    DEFAULT_PARITY,
    DEFAULT_RECONNECT_DELAY,
    DEFAULT_STOPBITS,
)
from .base_transport import BaseGPSTransport

logger = get_module_logger("SerialGPSTransport")

CLOSE_TIMEOUT = 1.0


class SerialGPSTransport(BaseGPSTransport):
    """Receiver on a UART or USB serial port, read from an event loop.

    Example:
        async with SerialGPSTransport("/dev/serial0", 9600) as transport:
            async for record in async_records(transport):
                print(record)
    """

    def __init__(
        self,
        port: str,
        baudrate: int = DEFAULT_BAUD_RATE,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        *,
        bytesize: int = DEFAULT_BYTESIZE,
        parity: str = DEFAULT_PARITY,
        stopbits: float = DEFAULT_STOPBITS,
    ):
        """
        Args:
            port: Serial port path (e.g., '/dev/serial0' or '/dev/ttyUSB0')
            baudrate: Line speed; most receivers ship at 9600
            reconnect_delay: Seconds between attempts in connect_with_retry
            bytesize: Data bits per character
            parity: pyserial parity code ('N', 'E', 'O', 'M', 'S')
            stopbits: 1, 1.5 or 2
        """
        super().__init__()
        self.port = port
        self.baudrate = baudrate
        self.reconnect_delay = reconnect_delay
        self.bytesize = bytesize
        self.parity = parity
        self.stopbits = stopbits
        self.bytes_received = 0

        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._last_error: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self._connected and self._reader is not None

    @property
    def last_error(self) -> Optional[str]:
        """Message of the most recent open or read failure."""
        return self._last_error

    def _fail(self, action: str, exc: BaseException) -> None:
        self._last_error = str(exc)
        logger.warning("%s %s failed: %s", action, self.port, exc)

    async def connect(self) -> bool:
        """Open the port. Returns False (and records last_error) on failure."""
        if self.is_connected:
            return True

        try:
            self._reader, self._writer = await serial_asyncio.open_serial_connection(
                url=self.port,
                baudrate=self.baudrate,
                bytesize=self.bytesize,
                parity=self.parity,
                stopbits=self.stopbits,
            )
        except (serial.SerialException, OSError) as exc:
            self._connected = False
            self._fail("Opening", exc)
            return False

        self._connected = True
        self._last_error = None
        logger.info("Connected to GPS on %s at %d baud", self.port, self.baudrate)
        return True

    async def connect_with_retry(self, attempts: int = 3) -> bool:
        """Call connect() up to ``attempts`` times, sleeping reconnect_delay between tries."""
        for attempt in range(1, attempts + 1):
            if await self.connect():
                return True
            if attempt < attempts:
                logger.info("Retrying %s in %.1fs (%d/%d)", self.port, self.reconnect_delay, attempt + 1, attempts)
                await asyncio.sleep(self.reconnect_delay)
        return False

    async def disconnect(self) -> None:
        writer, self._writer = self._writer, None
        self._reader = None
        self._connected = False
        if writer is None:
            return

        with contextlib.suppress(Exception):
            writer.close()
        try:
            await asyncio.wait_for(writer.wait_closed(), timeout=CLOSE_TIMEOUT)
        except asyncio.TimeoutError:
            logger.debug("Timed out closing %s", self.port)
        except (serial.SerialException, OSError) as exc:
            logger.debug("Error closing %s: %s", self.port, exc)

        logger.info("Disconnected from GPS on %s (%d bytes received)", self.port, self.bytes_received)

    async def read_chunk(self, size: int, timeout: float = 1.0) -> Optional[bytes]:
        """Return up to ``size`` bytes, b"" if none arrive in ``timeout``, None at EOF or on error."""
        if not self.is_connected:
            return None

        try:
            chunk = await asyncio.wait_for(self._reader.read(size), timeout=timeout)
        except asyncio.TimeoutError:
            return b""
        except (serial.SerialException, OSError) as exc:
            self._fail("Reading", exc)
            return None

        if not chunk:
            self._last_error = "Stream ended (EOF)"
            logger.warning("Serial stream ended on %s (EOF)", self.port)
            return None

        self.bytes_received += len(chunk)
        return chunk
