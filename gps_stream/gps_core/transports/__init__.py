"""GPS byte sources and transports."""

from .base_transport import BaseGPSTransport, ByteStreamSource
from .replay_source import ReplayByteSource
from .serial_source import SerialByteSource, open_gps_port
from .serial_transport import SerialGPSTransport

__all__ = [
    "BaseGPSTransport",
    "ByteStreamSource",
    "ReplayByteSource",
    "SerialByteSource",
    "SerialGPSTransport",
    "open_gps_port",
]
