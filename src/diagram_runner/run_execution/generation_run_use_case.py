"""Diagram generation run use-case service."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from types import ModuleType

from diagram_runner.component_loading import ComponentLoadError, load_component
from diagram_runner.configuration import RunConfiguration
from diagram_runner.diagram_discovery import DiagramDescriptor, discover_diagrams
from diagram_runner.image_persistence import ImagePersistenceError, save_image
from diagram_runner.image_rendering import CommandRunner, render_diagram
from diagram_runner.output_directory import OutputDirectoryError, prepare_output_directory
from diagram_runner.run_recording import NullRecorder, RunRecorder

from .run_contracts import DiagramOutcome, RunOutcome

ComponentLoader = Callable[[str, RunRecorder], ModuleType]
DiagramDiscoverer = Callable[[ModuleType, RunRecorder], Sequence[DiagramDescriptor]]


class RunExecutionError(Exception):
    """Raised when a generation run cannot be completed."""


def execute_diagram_generation_run(
    configuration: RunConfiguration,
    *,
    recorder_factory: Callable[[], RunRecorder] | None = None,
    component_loader: ComponentLoader | None = None,
    diagram_discoverer: DiagramDiscoverer | None = None,
    run_command: CommandRunner | None = None,
) -> RunOutcome:
    """Execute one full diagram generation run and return the run outcome.

    Component load and output directory failures abort the run with
    RunExecutionError; failures of individual diagrams are logged and reported in
    the outcome.
    """
    resolved_recorder_factory = recorder_factory or NullRecorder
    resolved_component_loader = component_loader or load_component
    resolved_diagram_discoverer = diagram_discoverer or discover_diagrams

    with resolved_recorder_factory() as recorder:
        recorder.log("Diagram generation run started...")
        _log_configuration_summary(configuration, recorder)

        try:
            component = resolved_component_loader(configuration.component_path, recorder)
        except ComponentLoadError as exc:
            recorder.log(f"Component load failed: {exc}", level=logging.ERROR)
            raise RunExecutionError(str(exc)) from exc

        diagrams = list(resolved_diagram_discoverer(component, recorder))
        if not diagrams:
            recorder.log("No diagrams discovered; nothing to render.", level=logging.WARNING)

        output_directory = _run_initialize_output_directory_stage(configuration, recorder)
        outcomes = _run_generate_diagram_images_stage(
            configuration, diagrams, output_directory, recorder, run_command
        )

        outcome = RunOutcome(
            output_directory=output_directory,
            diagrams_discovered=len(diagrams),
            diagram_outcomes=tuple(outcomes),
        )
        recorder.log(
            f"{len(outcome.written_paths)} of {outcome.diagrams_discovered} "
            "diagram image(s) written"
        )
        recorder.log("Diagram generation run finished...")
    return outcome


def _log_configuration_summary(configuration: RunConfiguration, recorder: RunRecorder) -> None:
    recorder.log("Run settings:")
    for option_name, value in configuration.summary_items():
        recorder.log(f"    [{option_name}]: {value}")


def _run_initialize_output_directory_stage(
    configuration: RunConfiguration, recorder: RunRecorder
) -> Path:
    recorder.log("Starting Stage: Output Directory Initialization...")
    try:
        directory = prepare_output_directory(
            configuration.output_directory, configuration.clean_requested, recorder
        )
    except OutputDirectoryError as exc:
        recorder.log(f"Output directory initialization failed: {exc}", level=logging.ERROR)
        raise RunExecutionError(str(exc)) from exc
    recorder.log("Finished Stage: Output Directory Initialization...")
    return directory


def _run_generate_diagram_images_stage(
    configuration: RunConfiguration,
    diagrams: Sequence[DiagramDescriptor],
    output_directory: Path,
    recorder: RunRecorder,
    run_command: CommandRunner | None,
) -> list[DiagramOutcome]:
    recorder.log(f"Starting Stage: Diagram Rendering (output={output_directory})...")
    outcomes = [
        _generate_single(configuration, diagram, output_directory, recorder, run_command)
        for diagram in diagrams
    ]
    recorder.log("Finished Stage: Diagram Rendering...")
    return outcomes


def _generate_single(
    configuration: RunConfiguration,
    diagram: DiagramDescriptor,
    output_directory: Path,
    recorder: RunRecorder,
    run_command: CommandRunner | None,
) -> DiagramOutcome:
    try:
        text = diagram.generate_text()
    except Exception as exc:  # pylint: disable=broad-exception-caught
        return _record_failure(diagram.name, f"text generation failed: {exc}", recorder)
    if not isinstance(text, str):
        return _record_failure(
            diagram.name,
            f"text generation failed: expected str, got {type(text).__name__}",
            recorder,
        )

    image = render_diagram(
        text,
        runtime_executable_path=configuration.effective_runtime_executable_path,
        render_engine_path=configuration.effective_render_engine_path,
        recorder=recorder,
        timeout_seconds=configuration.render_timeout_seconds,
        run_command=run_command,
    )
    if image is None:
        return _record_failure(diagram.name, "render engine produced no image", recorder)

    try:
        output_path = save_image(image, output_directory, diagram.name)
    except ImagePersistenceError as exc:
        return _record_failure(diagram.name, str(exc), recorder)

    recorder.log(f"Wrote diagram '{diagram.name}' to {output_path}")
    return DiagramOutcome.written(diagram.name, output_path)


def _record_failure(diagram_name: str, message: str, recorder: RunRecorder) -> DiagramOutcome:
    recorder.log(f"Diagram '{diagram_name}' failed: {message}", level=logging.ERROR)
    return DiagramOutcome.failed(diagram_name, message)
