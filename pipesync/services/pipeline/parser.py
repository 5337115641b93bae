"""Canonicalization of raw pipeline configs into JSON.

This is the single format-dispatch point: supporting a new input format means
adding one entry to ``_CANONICALIZERS``.
"""

from collections.abc import Callable

from pipesync.exceptions import ConfigParseError
from pipesync.models import ConfigFormat

from .converter import json_to_json, yaml_to_json

_CANONICALIZERS: dict[ConfigFormat, Callable[[str], str]] = {
    ConfigFormat.JSON: json_to_json,
    ConfigFormat.YAML: yaml_to_json,
}


def canonicalize(raw: str, config_format: ConfigFormat | str) -> str:
    """Produce the canonical JSON form of a config document.

    Args:
        raw: The config document as written by the caller.
        config_format: Format the document is written in.

    Returns:
        Canonical JSON string.

    Raises:
        ConfigParseError: If the format is unknown or the document is malformed.
    """
    try:
        fmt = ConfigFormat(config_format)
    except ValueError as e:
        raise ConfigParseError(
            str(config_format), raw, f"unsupported config format '{config_format}'"
        ) from e

    return _CANONICALIZERS[fmt](raw)
