"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class DiagramStatus(str, Enum):
    """Diagram generation outcome status."""

    WRITTEN = "written"
    FAILED = "failed"


@dataclass(frozen=True)
class DiagramOutcome:
    """Outcome of generating one discovered diagram."""

    diagram_name: str
    status: DiagramStatus
    output_path: Path | None
    error_message: str | None

    @staticmethod
    def written(diagram_name: str, output_path: Path) -> DiagramOutcome:
        return DiagramOutcome(
            diagram_name=diagram_name,
            status=DiagramStatus.WRITTEN,
            output_path=output_path,
            error_message=None,
        )

    @staticmethod
    def failed(diagram_name: str, error_message: str) -> DiagramOutcome:
        return DiagramOutcome(
            diagram_name=diagram_name,
            status=DiagramStatus.FAILED,
            output_path=None,
            error_message=error_message,
        )


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed run."""

    output_directory: Path
    diagrams_discovered: int
    diagram_outcomes: tuple[DiagramOutcome, ...]

    @property
    def written_paths(self) -> tuple[Path, ...]:
        return tuple(
            outcome.output_path
            for outcome in self.diagram_outcomes
            if outcome.output_path is not None
        )

    @property
    def failures(self) -> tuple[DiagramOutcome, ...]:
        return tuple(
            outcome for outcome in self.diagram_outcomes if outcome.status == DiagramStatus.FAILED
        )
