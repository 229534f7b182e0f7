"""PlantUML render engine invocation."""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Callable, Sequence

from diagram_runner.run_recording import NullRecorder, RunRecorder

from .render_models import ProcessResult, RenderedImage

CommandRunner = Callable[[Sequence[str], bytes, float | None], ProcessResult]

IMAGE_FORMAT = "png"
TEXT_ENCODING = "UTF-8"


def build_render_command(runtime_executable_path: str, render_engine_path: str) -> tuple[str, ...]:
    """Build the command line piping one diagram through PlantUML."""
    return (
        runtime_executable_path,
        "-Djava.awt.headless=true",
        "-jar",
        render_engine_path,
        "-pipe",
        f"-t{IMAGE_FORMAT}",
        "-charset",
        TEXT_ENCODING,
    )


def run_render_process(
    command: Sequence[str], input_bytes: bytes, timeout_seconds: float | None
) -> ProcessResult:
    """Run the render process to completion and capture its streams.

    `subprocess.run` waits for the child and closes its pipes on every path; on
    timeout it kills and reaps the child before re-raising.
    """
    completed = subprocess.run(
        list(command),
        input=input_bytes,
        capture_output=True,
        timeout=timeout_seconds,
        check=False,
    )
    return ProcessResult(
        exit_code=completed.returncode,
        stdout=completed.stdout or b"",
        stderr=(completed.stderr or b"").decode("utf-8", errors="replace"),
    )


def render_diagram(
    diagram_text: str,
    *,
    runtime_executable_path: str,
    render_engine_path: str,
    recorder: RunRecorder | None = None,
    timeout_seconds: float | None = None,
    run_command: CommandRunner | None = None,
) -> RenderedImage | None:
    """Render diagram text into image bytes, or return None when the engine fails.

    Unencodable text, launch failures, timeouts, non-zero exit codes and empty output are logged and
    reported as None; they never raise.
    """
    active_recorder = recorder or NullRecorder()
    command_runner = run_command or run_render_process
    command = build_render_command(runtime_executable_path, render_engine_path)
    command_text = shlex.join(command)
    active_recorder.log(f"Invoking render engine: {command_text}", level=logging.DEBUG)

    try:
        input_bytes = diagram_text.encode("utf-8")
    except UnicodeEncodeError as exc:
        active_recorder.log(f"Diagram text cannot be encoded as UTF-8: {exc}", level=logging.ERROR)
        return None

    try:
        result = command_runner(command, input_bytes, timeout_seconds)
    except subprocess.TimeoutExpired:
        active_recorder.log(
            f"Render engine timed out after {timeout_seconds} second(s): {command_text}",
            level=logging.ERROR,
        )
        return None
    except OSError as exc:
        active_recorder.log(
            f"Render engine could not be launched: {command_text}: {exc}",
            level=logging.ERROR,
        )
        return None

    if not result.succeeded:
        active_recorder.log(
            f"Render engine failed with exit code {result.exit_code}: "
            f"{_describe_stderr(result.stderr)}",
            level=logging.ERROR,
        )
        return None
    if not result.stdout:
        active_recorder.log(
            f"Render engine produced no image output: {_describe_stderr(result.stderr)}",
            level=logging.ERROR,
        )
        return None
    return RenderedImage(data=result.stdout)


def _describe_stderr(stderr: str) -> str:
    stripped = stderr.strip()
    return stripped or "(no error output)"
