"""Helpers for reading typed values out of a capture configuration."""
from typing import Callable, Dict, Optional, TypeVar

from extcap_config import CaptureConfigurationError, ConfigField

T = TypeVar("T")

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def config_value(configuration: Dict[ConfigField, str],
                 field: ConfigField,
                 convert: Callable[[str], T],
                 default: Optional[T] = None) -> Optional[T]:
    """Converted value of ``field``, or ``default`` when it was not passed."""
    if field not in configuration:
        return default
    raw = configuration[field]
    try:
        return convert(raw)
    except ValueError as e:
        raise CaptureConfigurationError(
            f'Invalid value {raw!r} for config field "{field.display_name}": {e}') from e
