"""Image rendering domain exports."""

from .render_invocation import (
    CommandRunner,
    build_render_command,
    render_diagram,
    run_render_process,
)
from .render_models import ProcessResult, RenderedImage

__all__ = [
    "CommandRunner",
    "ProcessResult",
    "RenderedImage",
    "build_render_command",
    "render_diagram",
    "run_render_process",
]
