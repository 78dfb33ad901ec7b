"""Sentence framing over raw byte streams."""

from .nmea_framer import END_OF_STREAM, PENDING, FrameResult, FrameStatus, NMEAFramer

__all__ = ["END_OF_STREAM", "PENDING", "FrameResult", "FrameStatus", "NMEAFramer"]
