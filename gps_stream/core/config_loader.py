"""Loader for ``key = value`` config.txt files."""

from pathlib import Path
from typing import Any, Dict, Optional

from gps_stream.core.logging_utils import get_module_logger

logger = get_module_logger(__name__)

_TRUE_VALUES = ('true', 'yes', 'on', '1')
_BOOL_VALUES = _TRUE_VALUES + ('false', 'no', 'off', '0')


class ConfigLoader:
    """Config file loader.

    Lines are ``key = value``; ``#`` starts a comment. Values are typed after
    the matching default when one exists, otherwise guessed.
    """

    @staticmethod
    def load(
        config_path: Path,
        defaults: Optional[Dict[str, Any]] = None,
        strict: bool = False
    ) -> Dict[str, Any]:
        config = defaults.copy() if defaults else {}
        config_path = Path(config_path)

        if not config_path.exists():
            if defaults:
                logger.debug("Config file not found at %s, using defaults", config_path)
            else:
                logger.warning("Config file not found at %s and no defaults provided", config_path)
            return config

        logger.debug("Loading config from: %s", config_path)

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                lines = f.readlines()
        except OSError as e:
            logger.error("Failed to load config file: %s", e)
            return config  # Return defaults on error

        for line_num, line in enumerate(lines, 1):
            line = line.strip()

            if not line or line.startswith('#'):
                continue

            if '=' not in line:
                logger.warning(
                    "Invalid config line %d (missing '='): %s",
                    line_num, line
                )
                continue

            key, value = line.split('=', 1)
            key = key.strip()
            value = value.strip()

            if '#' in value:
                value = value.split('#', 1)[0].strip()

            if strict and defaults is not None and key not in defaults:
                logger.warning(
                    "Unknown config key '%s' (line %d) - ignored in strict mode",
                    key, line_num
                )
                continue

            if defaults and key in defaults and defaults[key] is not None:
                config[key] = ConfigLoader._parse_value_with_type(
                    value, type(defaults[key]), defaults[key]
                )
            else:
                config[key] = ConfigLoader._parse_value(value)

        logger.info("Loaded config from %s (%d values)", config_path, len(config))
        return config

    @staticmethod
    def _parse_value(value: str) -> Any:
        value_lower = value.lower()
        if value_lower in _BOOL_VALUES:
            return value_lower in _TRUE_VALUES

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    @staticmethod
    def _parse_value_with_type(value: str, target_type: type, default: Any = None) -> Any:
        if target_type == bool:
            return value.lower() in _TRUE_VALUES

        if target_type is int:
            try:
                return int(value, 0)  # Support decimal, hex (0x...), octal (0o...), binary (0b...)
            except ValueError:
                logger.warning("Failed to parse '%s' as int, using default", value)
                return default

        if target_type is float:
            try:
                return float(value)
            except ValueError:
                logger.warning("Failed to parse '%s' as float, using default", value)
                return default

        if issubclass(target_type, Path):
            return Path(value)

        return value

    @staticmethod
    def _format_config_value(value: Any) -> str:
        if isinstance(value, bool):
            return 'true' if value else 'false'
        return str(value)

    @staticmethod
    def write(config_path: Path, values: Dict[str, Any]) -> None:
        """Write ``values`` as a fresh config file."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [f"{key} = {ConfigLoader._format_config_value(value)}" for key, value in values.items()]
        config_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        logger.debug("Wrote %d config values to %s", len(values), config_path)


def load_config_file(
    config_path: Optional[Path] = None,
    defaults: Optional[Dict[str, Any]] = None,
    strict: bool = False
) -> Dict[str, Any]:
    """Load ``config_path``, or the packaged GPS config.txt when omitted."""
    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "gps_core" / "config.txt"
    return ConfigLoader.load(config_path, defaults, strict)
