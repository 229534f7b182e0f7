"""Diagram generation run use-case tests."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from types import ModuleType

import pytest
from diagram_runner.component_loading import ComponentLoadError
from diagram_runner.configuration import RunConfiguration
from diagram_runner.diagram_discovery import DiagramDescriptor
from diagram_runner.image_rendering import ProcessResult
from diagram_runner.run_execution import (
    DiagramStatus,
    RunExecutionError,
    execute_diagram_generation_run,
)


class _RecordingRecorder:
    def __init__(self) -> None:
        self.lines: list[tuple[int, str]] = []
        self.closed = False

    def log(self, message: str, *, level: int = logging.INFO) -> None:
        assert not self.closed
        self.lines.append((level, message))

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> _RecordingRecorder:
        return self

    def __exit__(self, exc_type, exc, traceback) -> None:
        self.close()

    @property
    def messages(self) -> list[str]:
        return [message for _, message in self.lines]


class _EngineStub:
    """Echoes the diagram text as image bytes, failing for texts listed in `failing`."""

    def __init__(self, failing: Sequence[str] = ()) -> None:
        self.failing = set(failing)
        self.calls = 0

    def __call__(
        self, command: Sequence[str], input_bytes: bytes, timeout: float | None
    ) -> ProcessResult:
        self.calls += 1
        text = input_bytes.decode("utf-8")
        if text in self.failing:
            return ProcessResult(exit_code=1, stdout=b"", stderr=f"cannot render {text}")
        return ProcessResult(exit_code=0, stdout=b"PNG:" + input_bytes, stderr="")


def _descriptor(name: str, text: str | None = None) -> DiagramDescriptor:
    return DiagramDescriptor(name=name, text_factory=lambda: text if text is not None else name)


def _discoverer(descriptors: Sequence[DiagramDescriptor]):
    def _discover(component: ModuleType, recorder) -> list[DiagramDescriptor]:
        return list(descriptors)

    return _discover


def _run(
    configuration: RunConfiguration,
    descriptors: Sequence[DiagramDescriptor],
    engine: _EngineStub,
    recorder: _RecordingRecorder,
):
    return execute_diagram_generation_run(
        configuration,
        recorder_factory=lambda: recorder,
        component_loader=lambda path, active_recorder: ModuleType("stub_component"),
        diagram_discoverer=_discoverer(descriptors),
        run_command=engine,
    )


def test_every_discovered_diagram_becomes_one_sanitized_file(tmp_path: Path) -> None:
    recorder = _RecordingRecorder()
    descriptors = [_descriptor("first.png"), _descriptor("A/B:C"), _descriptor("third.png")]

    outcome = _run(
        RunConfiguration(component_path="stub", output_directory=str(tmp_path)),
        descriptors,
        _EngineStub(),
        recorder,
    )

    assert sorted(path.name for path in tmp_path.iterdir()) == ["A_B_C", "first.png", "third.png"]
    assert (tmp_path / "A_B_C").read_bytes() == b"PNG:A/B:C"
    assert outcome.diagrams_discovered == 3
    assert outcome.output_directory == tmp_path.resolve()
    assert [item.status for item in outcome.diagram_outcomes] == [DiagramStatus.WRITTEN] * 3
    assert recorder.closed is True


def test_render_failure_of_one_diagram_does_not_abort_the_others(tmp_path: Path) -> None:
    recorder = _RecordingRecorder()
    engine = _EngineStub(failing=["second-text"])
    descriptors = [
        _descriptor("one.png"),
        _descriptor("two.png", "second-text"),
        _descriptor("three.png"),
    ]

    outcome = _run(
        RunConfiguration(component_path="stub", output_directory=str(tmp_path)),
        descriptors,
        engine,
        recorder,
    )

    assert sorted(path.name for path in tmp_path.iterdir()) == ["one.png", "three.png"]
    assert engine.calls == 3
    assert [failure.diagram_name for failure in outcome.failures] == ["two.png"]
    error_lines = [message for level, message in recorder.lines if level == logging.ERROR]
    assert any("two.png" in line for line in error_lines)
    assert any("cannot render second-text" in line for line in error_lines)
    assert "2 of 3 diagram image(s) written" in recorder.messages
    assert recorder.messages[-1] == "Diagram generation run finished..."


def test_text_generation_error_is_a_per_diagram_failure(tmp_path: Path) -> None:
    recorder = _RecordingRecorder()

    def _explode() -> str:
        raise RuntimeError("generator broke")

    descriptors = [DiagramDescriptor(name="broken.png", text_factory=_explode), _descriptor("ok.png")]

    outcome = _run(
        RunConfiguration(component_path="stub", output_directory=str(tmp_path)),
        descriptors,
        _EngineStub(),
        recorder,
    )

    assert [path.name for path in tmp_path.iterdir()] == ["ok.png"]
    assert "generator broke" in (outcome.failures[0].error_message or "")


def test_generator_returning_non_text_is_a_per_diagram_failure(tmp_path: Path) -> None:
    recorder = _RecordingRecorder()
    engine = _EngineStub()
    descriptors = [
        DiagramDescriptor(name="nothing.png", text_factory=lambda: None),
        _descriptor("ok.png"),
    ]

    outcome = _run(
        RunConfiguration(component_path="stub", output_directory=str(tmp_path)),
        descriptors,
        engine,
        recorder,
    )

    assert [path.name for path in tmp_path.iterdir()] == ["ok.png"]
    assert engine.calls == 1
    assert [failure.diagram_name for failure in outcome.failures] == ["nothing.png"]
    assert "expected str, got NoneType" in (outcome.failures[0].error_message or "")
    assert recorder.messages[-1] == "Diagram generation run finished..."


def test_unencodable_diagram_text_is_a_per_diagram_failure(tmp_path: Path) -> None:
    recorder = _RecordingRecorder()
    engine = _EngineStub()
    descriptors = [_descriptor("surrogate.png", "@startuml\n\udcff\n@enduml"), _descriptor("ok.png")]

    outcome = _run(
        RunConfiguration(component_path="stub", output_directory=str(tmp_path)),
        descriptors,
        engine,
        recorder,
    )

    assert [path.name for path in tmp_path.iterdir()] == ["ok.png"]
    assert engine.calls == 1
    assert [failure.diagram_name for failure in outcome.failures] == ["surrogate.png"]
    error_lines = [message for level, message in recorder.lines if level == logging.ERROR]
    assert any("cannot be encoded as UTF-8" in line for line in error_lines)
    assert any("surrogate.png" in line for line in error_lines)


def test_write_failure_is_a_per_diagram_failure(tmp_path: Path) -> None:
    recorder = _RecordingRecorder()
    (tmp_path / "taken.png").mkdir()

    outcome = _run(
        RunConfiguration(component_path="stub", output_directory=str(tmp_path)),
        [_descriptor("taken.png"), _descriptor("free.png")],
        _EngineStub(),
        recorder,
    )

    assert [failure.diagram_name for failure in outcome.failures] == ["taken.png"]
    assert (tmp_path / "free.png").read_bytes() == b"PNG:free.png"


def test_component_load_failure_is_fatal_and_recorder_is_released(tmp_path: Path) -> None:
    recorder = _RecordingRecorder()
    output_directory = tmp_path / "never-created"
    discovered: list[str] = []

    def _failing_loader(path: str, active_recorder) -> ModuleType:
        raise ComponentLoadError(f"Component not found: {path}")

    def _discover(component: ModuleType, active_recorder) -> list[DiagramDescriptor]:
        discovered.append("called")
        return []

    with pytest.raises(RunExecutionError, match="Component not found"):
        execute_diagram_generation_run(
            RunConfiguration(component_path="missing.py", output_directory=str(output_directory)),
            recorder_factory=lambda: recorder,
            component_loader=_failing_loader,
            diagram_discoverer=_discover,
            run_command=_EngineStub(),
        )

    assert recorder.closed is True
    assert discovered == []
    assert not output_directory.exists()
    assert any("Component load failed" in line for line in recorder.messages)


def test_missing_component_file_is_fatal_with_real_loader(tmp_path: Path) -> None:
    recorder = _RecordingRecorder()

    with pytest.raises(RunExecutionError, match="not found"):
        execute_diagram_generation_run(
            RunConfiguration(
                component_path=str(tmp_path / "absent.py"),
                output_directory=str(tmp_path / "out"),
            ),
            recorder_factory=lambda: recorder,
            run_command=_EngineStub(),
        )

    assert recorder.closed is True
    assert not (tmp_path / "out").exists()


def test_empty_discovery_completes_without_rendering(tmp_path: Path) -> None:
    recorder = _RecordingRecorder()
    engine = _EngineStub()

    outcome = _run(
        RunConfiguration(component_path="stub", output_directory=str(tmp_path / "out")),
        [],
        engine,
        recorder,
    )

    assert outcome.diagrams_discovered == 0
    assert outcome.diagram_outcomes == ()
    assert engine.calls == 0
    assert (tmp_path / "out").is_dir()
    assert recorder.messages[-1] == "Diagram generation run finished..."


def test_rerun_without_clean_overwrites_identical_files(tmp_path: Path) -> None:
    configuration = RunConfiguration(component_path="stub", output_directory=str(tmp_path))
    descriptors = [_descriptor("one.png"), _descriptor("two.png")]

    _run(configuration, descriptors, _EngineStub(), _RecordingRecorder())
    first = {path.name: path.read_bytes() for path in tmp_path.iterdir()}
    _run(configuration, descriptors, _EngineStub(), _RecordingRecorder())
    second = {path.name: path.read_bytes() for path in tmp_path.iterdir()}

    assert first == second
    assert sorted(second) == ["one.png", "two.png"]


def test_clean_purges_previous_files_before_rendering(tmp_path: Path) -> None:
    (tmp_path / "stale.png").write_bytes(b"stale")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "unrelated.txt").write_text("x", encoding="utf-8")

    _run(
        RunConfiguration(component_path="stub", output_directory=str(tmp_path), clean="true"),
        [_descriptor("fresh.png")],
        _EngineStub(),
        _RecordingRecorder(),
    )

    files = sorted(path.name for path in tmp_path.rglob("*") if path.is_file())
    assert files == ["fresh.png"]
    assert (tmp_path / "nested").is_dir()


def test_clean_flag_with_false_value_keeps_previous_files(tmp_path: Path) -> None:
    (tmp_path / "keep.png").write_bytes(b"keep")

    _run(
        RunConfiguration(component_path="stub", output_directory=str(tmp_path), clean="false"),
        [],
        _EngineStub(),
        _RecordingRecorder(),
    )

    assert (tmp_path / "keep.png").exists()


def test_output_directory_failure_is_fatal(tmp_path: Path) -> None:
    recorder = _RecordingRecorder()
    occupied = tmp_path / "occupied"
    occupied.write_text("file", encoding="utf-8")
    engine = _EngineStub()

    with pytest.raises(RunExecutionError):
        _run(
            RunConfiguration(component_path="stub", output_directory=str(occupied)),
            [_descriptor("one.png")],
            engine,
            recorder,
        )

    assert engine.calls == 0
    assert recorder.closed is True


def test_configuration_summary_logs_effective_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    recorder = _RecordingRecorder()

    _run(RunConfiguration(component_path="stub"), [], _EngineStub(), recorder)

    messages = recorder.messages
    assert messages[0] == "Diagram generation run started..."
    assert "Run settings:" in messages
    assert f"    [OutputDirectory]: {tmp_path.resolve()}" in messages
    assert "    [ComponentPath]: stub" in messages
    assert "    [Clean]: False" in messages
    assert any(line.startswith("    [RuntimeExecutablePath]: java") for line in messages)
    assert any(
        line.startswith("    [RenderEnginePath]: ") and line.endswith("plantuml.jar")
        for line in messages
    )
    assert "    [RenderTimeoutSeconds]: None" in messages


def test_stages_run_in_fixed_order(tmp_path: Path) -> None:
    recorder = _RecordingRecorder()

    _run(
        RunConfiguration(component_path="stub", output_directory=str(tmp_path)),
        [_descriptor("one.png")],
        _EngineStub(),
        recorder,
    )

    messages = recorder.messages
    stage_markers = [
        "Diagram generation run started...",
        "Starting Stage: Output Directory Initialization...",
        "Finished Stage: Output Directory Initialization...",
        f"Starting Stage: Diagram Rendering (output={tmp_path.resolve()})...",
        "Finished Stage: Diagram Rendering...",
        "Diagram generation run finished...",
    ]
    positions = [messages.index(marker) for marker in stage_markers]
    assert positions == sorted(positions)
