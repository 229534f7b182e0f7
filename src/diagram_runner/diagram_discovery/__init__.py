"""Diagram discovery domain exports."""

from .diagram_discoverer import discover_diagrams
from .diagram_models import (
    Diagram,
    DiagramDescriptor,
    DiagramGenerator,
    StaticTextGenerator,
    TextDiagram,
)

__all__ = [
    "Diagram",
    "DiagramDescriptor",
    "DiagramGenerator",
    "StaticTextGenerator",
    "TextDiagram",
    "discover_diagrams",
]
