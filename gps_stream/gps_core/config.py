"""Typed configuration for the GPS reader."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from gps_stream.core.config_loader import ConfigLoader, load_config_file

from .constants import (
    ALLOW_BARE_LF,
    CENTURY_PIVOT,
    DEFAULT_BAUD_RATE,
    DEFAULT_BYTESIZE,
    DEFAULT_PARITY,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_READ_SIZE,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_SERIAL_PORT,
    DEFAULT_STOPBITS,
    MAX_SENTENCE_LENGTH,
    REQUIRE_CHECKSUM,
)


@dataclass(slots=True)
class GPSConfig:
    """Typed configuration for the GPS reader."""

    # Serial configuration
    serial_port: str = DEFAULT_SERIAL_PORT
    baud_rate: int = DEFAULT_BAUD_RATE
    bytesize: int = DEFAULT_BYTESIZE
    parity: str = DEFAULT_PARITY
    stopbits: float = float(DEFAULT_STOPBITS)
    read_timeout_s: float = DEFAULT_READ_TIMEOUT

    # Framing
    read_size: int = DEFAULT_READ_SIZE
    max_sentence_length: int = MAX_SENTENCE_LENGTH
    allow_bare_lf: bool = ALLOW_BARE_LF

    # Parsing
    require_checksum: bool = REQUIRE_CHECKSUM
    century_pivot: int = CENTURY_PIVOT
    enabled_sentences: str = ""  # comma separated, empty = all supported

    # Reader loop
    poll_interval_s: float = DEFAULT_POLL_INTERVAL
    skip_errors: bool = True

    # Logging
    log_level: str = "info"
    log_file: str = ""

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "GPSConfig":
        """Build config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in values.items() if key in known})

    @classmethod
    def from_file(cls, config_path: Optional[Path] = None, strict: bool = True) -> "GPSConfig":
        """Load from a config.txt (the packaged default when omitted)."""
        defaults = asdict(cls())
        return cls.from_dict(load_config_file(config_path, defaults, strict))

    def apply_args(self, args: Any) -> "GPSConfig":
        """Return a copy with CLI overrides applied.

        Any attribute of ``args`` named like a config field and not None
        wins over the file value.
        """
        overrides = {}
        for f in fields(self):
            value = getattr(args, f.name, None)
            if value is not None:
                overrides[f.name] = value
        return replace(self, **overrides)

    def sentence_filter(self) -> Optional[set[str]]:
        """Enabled sentence types as a set, or None for all."""
        names = {name.strip().upper() for name in self.enabled_sentences.split(",") if name.strip()}
        return names or None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def save(self, config_path: Path) -> None:
        ConfigLoader.write(config_path, self.to_dict())
