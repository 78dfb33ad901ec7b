"""
Base Transport

Interfaces the framer and reader loop consume. A ByteStreamSource is the
synchronous pull interface; BaseGPSTransport is the async counterpart for
callers running inside an event loop.
"""

from abc import ABC, abstractmethod
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ByteStreamSource(Protocol):
    """Anything that can hand over raw receiver bytes.

    ``read`` returns up to ``size`` bytes that are available now (blocking
    only as long as the source is configured to), ``b""`` when nothing
    arrived yet, and ``None`` once the stream has ended.
    """

    def read(self, size: int) -> Optional[bytes]:
        ...


class BaseGPSTransport(ABC):
    """
    Abstract base class for async, read-only GPS transports.

    GPS receivers stream continuously and take no commands here, so the
    interface is connect / read / disconnect.
    """

    def __init__(self):
        """Initialize the transport."""
        self._connected = False

    @property
    def is_connected(self) -> bool:
        """Check if the transport is connected."""
        return self._connected

    @abstractmethod
    async def connect(self) -> bool:
        """
        Establish connection to the device.

        Returns:
            True if connection was successful
        """
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """
        Close the connection to the device.
        """
        ...

    @abstractmethod
    async def read_chunk(self, size: int, timeout: float = 1.0) -> Optional[bytes]:
        """
        Read whatever bytes arrive within ``timeout``.

        Returns:
            Up to ``size`` bytes, b"" on timeout, None when the stream ended
        """
        ...

    async def __aenter__(self) -> "BaseGPSTransport":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()
