"""Output directory preparation service."""

from __future__ import annotations

import logging
from pathlib import Path

from diagram_runner.run_recording import NullRecorder, RunRecorder


class OutputDirectoryError(Exception):
    """Raised when the output directory cannot be created or cleaned."""


def prepare_output_directory(
    path: Path | str | None, clean_requested: bool, recorder: RunRecorder | None = None
) -> Path:
    """Resolve and create the output directory, optionally removing every file beneath it.

    Cleaning is best-effort: all files are attempted, each failure is logged, and
    the failures are reported together afterwards.

    Raises:
      OutputDirectoryError: If the directory cannot be created or some files survive cleaning.
    """
    active_recorder = recorder or NullRecorder()
    directory = Path(path or ".").resolve()
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputDirectoryError(f"Cannot create output directory {directory}: {exc}") from exc
    if not directory.is_dir():
        raise OutputDirectoryError(f"Output path is not a directory: {directory}")

    if clean_requested:
        _remove_files(directory, active_recorder)
    return directory


def _remove_files(directory: Path, recorder: RunRecorder) -> None:
    removed = 0
    failures: list[str] = []
    for file_path in _files_beneath(directory):
        try:
            file_path.unlink()
        except FileNotFoundError:
            continue
        except OSError as exc:
            recorder.log(f"Could not remove {file_path}: {exc}", level=logging.ERROR)
            failures.append(str(file_path))
            continue
        removed += 1

    recorder.log(f"Cleaned output directory {directory}: removed {removed} file(s)")
    if failures:
        raise OutputDirectoryError(
            f"Could not remove {len(failures)} file(s) from {directory}: {', '.join(failures)}"
        )


def _files_beneath(directory: Path) -> list[Path]:
    return sorted(
        entry for entry in directory.rglob("*") if entry.is_symlink() or not entry.is_dir()
    )
