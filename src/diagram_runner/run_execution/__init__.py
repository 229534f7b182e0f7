"""Run execution domain exports."""

from .generation_run_use_case import RunExecutionError, execute_diagram_generation_run
from .run_contracts import DiagramOutcome, DiagramStatus, RunOutcome

__all__ = [
    "DiagramOutcome",
    "DiagramStatus",
    "RunOutcome",
    "RunExecutionError",
    "execute_diagram_generation_run",
]
