"""Conversion between the YAML and JSON forms of a pipeline config document.

Pure functions, no I/O. JSON output is canonical: sorted keys, compact
separators, UTF-8 kept as-is. Malformed input raises ConfigParseError with the
underlying YAML/JSON error chained.
"""

import json
from typing import Any

import yaml  # PyYAML

from pipesync.exceptions import ConfigParseError
from pipesync.models import ConfigFormat


class _ConfigLoader(yaml.SafeLoader):
    """Safe loader that keeps timestamps as plain strings.

    JSON has no date type, so ``2024-01-01`` must survive as the string it was
    written as instead of becoming a ``datetime.date``.
    """


_ConfigLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _json_key(key: Any, raw: str) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool) or key is None:
        return json.dumps(key)
    if isinstance(key, int | float):
        return str(key)
    raise ConfigParseError(
        ConfigFormat.YAML.value, raw, f"mapping key {key!r} cannot be represented in JSON"
    )


def _to_json_value(value: Any, raw: str) -> Any:
    """Recursively check a loaded YAML value is representable as JSON."""
    if isinstance(value, dict):
        mapping: dict[str, Any] = {}
        for key, item in value.items():
            json_key = _json_key(key, raw)
            if json_key in mapping:
                raise ConfigParseError(
                    ConfigFormat.YAML.value,
                    raw,
                    f"duplicate mapping key {key!r} after conversion to JSON",
                )
            mapping[json_key] = _to_json_value(item, raw)
        return mapping
    if isinstance(value, list):
        return [_to_json_value(v, raw) for v in value]
    if value is None or isinstance(value, str | bool | int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise ConfigParseError(
                ConfigFormat.YAML.value, raw, f"{value!r} cannot be represented in JSON"
            )
        return value
    raise ConfigParseError(
        ConfigFormat.YAML.value,
        raw,
        f"value of type {type(value).__name__} cannot be represented in JSON",
    )


def dump_json(data: Any) -> str:
    """Serialize a config structure to canonical JSON."""
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def load_json(raw: str) -> Any:
    """Parse a JSON document, rejecting NaN and Infinity.

    Raises:
        ConfigParseError: If the document is not well-formed JSON.
    """
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:
        raise ConfigParseError(ConfigFormat.JSON.value, raw, str(e)) from e


def load_yaml(raw: str) -> Any:
    """Parse a YAML document into JSON-compatible data.

    Raises:
        ConfigParseError: If the document is not well-formed YAML or holds
            values JSON cannot represent.
    """
    try:
        data = yaml.load(raw, Loader=_ConfigLoader)  # noqa: S506 - SafeLoader subclass
    except yaml.YAMLError as e:
        raise ConfigParseError(ConfigFormat.YAML.value, raw, str(e)) from e
    return _to_json_value(data, raw)


def yaml_to_json(markup: str) -> str:
    """Convert a YAML document to canonical JSON."""
    return dump_json(load_yaml(markup))


def json_to_json(document: str) -> str:
    """Validate a JSON document and re-encode it canonically."""
    return dump_json(load_json(document))


def json_to_yaml(document: str) -> str:
    """Convert a JSON document to YAML."""
    data = load_json(document)
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=True, allow_unicode=True)
