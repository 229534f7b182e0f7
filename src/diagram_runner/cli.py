"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from diagram_runner.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    build_configuration,
    load_configuration,
    write_placeholder_configuration,
)
from diagram_runner.run_execution import RunExecutionError, execute_diagram_generation_run
from diagram_runner.run_recording import LoggingRecorder


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="diagram-runner")
def cli() -> None:
    """Render the diagrams declared in a Python component through PlantUML."""


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML run configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML run configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="generate")
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional YAML run configuration; explicit options override its values",
)
@click.option(
    "--component",
    "component",
    required=False,
    help="Python module file, package directory, or dotted module name to scan",
)
@click.option(
    "--output-dir",
    "output_directory",
    required=False,
    type=click.Path(path_type=str),
    help="Directory receiving rendered images (default: current directory)",
)
@click.option(
    "--clean",
    "clean",
    required=False,
    help="Remove every file beneath the output directory first (true/false)",
)
@click.option(
    "--java-path",
    "java_path",
    required=False,
    help="Java launcher used to start PlantUML (default: java)",
)
@click.option(
    "--plantuml",
    "plantuml",
    required=False,
    type=click.Path(path_type=str),
    help="PlantUML jar archive (default: plantuml.jar next to the package)",
)
@click.option(
    "--render-timeout",
    "render_timeout_seconds",
    required=False,
    type=click.IntRange(min=1),
    help="Seconds to wait for one diagram before treating it as failed",
)
@click.option(
    "--log-file",
    "log_file",
    required=False,
    type=click.Path(path_type=str),
    help="Optional file receiving a copy of the run log",
)
@click.option("--verbose", is_flag=True, default=False, help="Log debug details.")
def generate(  # pylint: disable=too-many-arguments
    config_path: str | None,
    component: str | None,
    output_directory: str | None,
    clean: str | None,
    java_path: str | None,
    plantuml: str | None,
    render_timeout_seconds: int | None,
    log_file: str | None,
    verbose: bool,
) -> None:
    """Discover diagrams in a component and write their rendered images."""
    _configure_logging(verbose)
    options = {
        "component": component,
        "output_directory": output_directory,
        "clean": clean,
        "java_path": java_path,
        "plantuml": plantuml,
        "render_timeout_seconds": render_timeout_seconds,
    }
    try:
        if config_path:
            configuration = load_configuration(config_path, overrides=options)
        else:
            configuration = build_configuration(
                {key: value for key, value in options.items() if value is not None}
            )
        outcome = execute_diagram_generation_run(
            configuration,
            recorder_factory=lambda: LoggingRecorder(log_file=log_file),
        )
    except (ConfigurationError, RunExecutionError, OSError) as exc:
        raise CliError(str(exc)) from exc
    for path in outcome.written_paths:
        click.echo(str(path))


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
