"""Mock devices and byte sources."""

from .serial_mocks import ChunkedByteSource, MockGPSDevice, MockSerialConfig, MockSerialDevice

__all__ = ["ChunkedByteSource", "MockGPSDevice", "MockSerialConfig", "MockSerialDevice"]
