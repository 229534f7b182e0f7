"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import RunConfiguration

_PATH_KEYS = ("component", "output_directory", "java_path", "plantuml")
_STRING_KEYS = ("component", "output_directory", "java_path", "plantuml", "clean")
_KNOWN_KEYS = frozenset((*_STRING_KEYS, "render_timeout_seconds"))


class ConfigurationError(Exception):
    """Raised when the run configuration is invalid."""


def load_configuration(
    config_path: Path | str, *, overrides: Mapping[str, Any] | None = None
) -> RunConfiguration:
    """Load a YAML run configuration file and apply explicit overrides on top of it.

    Relative paths inside the file resolve against the file's directory; override
    values are taken as given.
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    values = _normalize_file_values(parsed, path.resolve().parent)
    values.update({key: value for key, value in (overrides or {}).items() if value is not None})
    return build_configuration(values)


def build_configuration(values: Mapping[str, Any]) -> RunConfiguration:
    """Validate raw option values and build the immutable run configuration."""
    unknown = sorted(set(values) - _KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    component = _optional_string(values.get("component"), "component")
    if component is None:
        raise ConfigurationError("component is required.")

    return RunConfiguration(
        component_path=component,
        output_directory=_optional_string(values.get("output_directory"), "output_directory"),
        clean=_optional_clean_flag(values.get("clean")),
        runtime_executable_path=_optional_string(values.get("java_path"), "java_path"),
        render_engine_path=_optional_string(values.get("plantuml"), "plantuml"),
        render_timeout_seconds=_optional_positive_int(
            values.get("render_timeout_seconds"), "render_timeout_seconds"
        ),
    )


def _normalize_file_values(section: Mapping[str, Any], base_path: Path) -> dict[str, Any]:
    values = dict(section)
    for key in _PATH_KEYS:
        raw_value = values.get(key)
        if isinstance(raw_value, str) and raw_value.strip():
            values[key] = _resolve_path(base_path, raw_value.strip(), key)
    return values


def _resolve_path(base_path: Path, raw_path: str, key: str) -> str:
    candidate = Path(raw_path)
    if candidate.is_absolute():
        return str(candidate)
    if key in ("component", "java_path") and len(candidate.parts) == 1:
        # Bare names: dotted module names and launchers looked up on PATH.
        resolved = base_path / candidate
        return str(resolved) if resolved.exists() else raw_path
    return str((base_path / candidate).resolve())


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _optional_clean_flag(value: Any) -> str | None:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    return _optional_string(value, "clean")


def _optional_positive_int(value: Any, field_name: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
