"""Configuration domain entities."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

DEFAULT_OUTPUT_DIRECTORY = "."
DEFAULT_RENDER_ENGINE_FILENAME = "plantuml.jar"

_TRUE_VALUES = frozenset({"true", "yes", "on", "1"})
_FALSE_VALUES = frozenset({"false", "no", "off", "0"})


def default_runtime_executable() -> str:
    """Return the conventional Java launcher name for the host platform."""
    if sys.platform.startswith("win"):
        return "java.exe"
    return "java"


def default_render_engine_path() -> Path:
    """Return the PlantUML archive location co-located with the installed package."""
    return Path(__file__).resolve().parents[1] / DEFAULT_RENDER_ENGINE_FILENAME


def parse_boolean_flag(value: str | None, *, default: bool = False) -> bool:
    """Interpret a boolean-like string, falling back to `default` when unrecognized."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


@dataclass(frozen=True)
class RunConfiguration:
    """Options recognized by one diagram generation run."""

    component_path: str
    output_directory: str | None = None
    clean: str | None = None
    runtime_executable_path: str | None = None
    render_engine_path: str | None = None
    render_timeout_seconds: int | None = None

    @property
    def effective_output_directory(self) -> Path:
        return Path(self.output_directory or DEFAULT_OUTPUT_DIRECTORY).resolve()

    @property
    def clean_requested(self) -> bool:
        return parse_boolean_flag(self.clean)

    @property
    def effective_runtime_executable_path(self) -> str:
        return self.runtime_executable_path or default_runtime_executable()

    @property
    def effective_render_engine_path(self) -> str:
        return self.render_engine_path or str(default_render_engine_path())

    def summary_items(self) -> tuple[tuple[str, object], ...]:
        """Return every recognized option with the value actually in effect."""
        return (
            ("ComponentPath", self.component_path),
            ("OutputDirectory", self.effective_output_directory),
            ("Clean", self.clean_requested),
            ("RuntimeExecutablePath", self.effective_runtime_executable_path),
            ("RenderEnginePath", self.effective_render_engine_path),
            ("RenderTimeoutSeconds", self.render_timeout_seconds),
        )
