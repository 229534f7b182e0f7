"""Image rendering domain entities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProcessResult:
    """Exit status and captured streams of one finished child process."""

    exit_code: int
    stdout: bytes
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class RenderedImage:
    """Image payload produced by the render engine for one diagram."""

    data: bytes

    def __post_init__(self) -> None:
        if not self.data:
            raise ValueError("Rendered image data must not be empty.")
