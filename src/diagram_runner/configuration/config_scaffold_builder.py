"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "diagram-runner.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Run configuration template for diagram-runner.
# Replace the <REQUIRED> placeholder before running generate.
# Remove or fill <OPTIONAL> entries; removed entries fall back to their defaults.
# Relative paths resolve against the directory holding this file.

# Python module file, package directory, or dotted module name to scan for diagrams.
component: "<REQUIRED>"

# Directory receiving the rendered images (default: current directory).
# output_directory: "<OPTIONAL>"

# Remove every file beneath output_directory before rendering (true/false, default false).
# clean: "<OPTIONAL>"

# Java launcher used to start PlantUML (default: java on PATH).
# java_path: "<OPTIONAL>"

# PlantUML jar archive (default: plantuml.jar next to the installed package).
# plantuml: "<OPTIONAL>"

# Seconds to wait for one diagram before giving up on it (default: wait indefinitely).
# render_timeout_seconds: "<OPTIONAL>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML run configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder run configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Run configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
