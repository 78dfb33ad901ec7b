"""Replay recorded NMEA captures as a byte stream."""

from __future__ import annotations

import io
from pathlib import Path
from typing import BinaryIO, Optional, Union

from ..constants import DEFAULT_READ_SIZE


class ReplayByteSource:
    """ByteStreamSource over a file, raw bytes, or any binary stream.

    ``chunk_size`` caps every read, which makes it easy to reproduce the
    fragmentation a slow serial link produces.
    """

    def __init__(
        self,
        data: Union[bytes, bytearray, str, Path, BinaryIO],
        chunk_size: Optional[int] = None,
    ):
        self._owns_stream = False
        if isinstance(data, (bytes, bytearray)):
            self._stream: BinaryIO = io.BytesIO(bytes(data))
        elif isinstance(data, (str, Path)):
            self._stream = open(data, "rb")
            self._owns_stream = True
        else:
            self._stream = data
        self.chunk_size = chunk_size or DEFAULT_READ_SIZE
        self._exhausted = False

    @classmethod
    def from_path(cls, path: Union[str, Path], chunk_size: Optional[int] = None) -> "ReplayByteSource":
        return cls(Path(path), chunk_size)

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def read(self, size: int) -> Optional[bytes]:
        if self._exhausted:
            return None
        chunk = self._stream.read(min(size, self.chunk_size))
        if not chunk:
            self._exhausted = True
            self.close()
            return None
        return chunk

    def close(self) -> None:
        if self._owns_stream and not self._stream.closed:
            self._stream.close()

    def __enter__(self) -> "ReplayByteSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
