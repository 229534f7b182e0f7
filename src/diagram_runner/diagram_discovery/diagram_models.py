"""Diagram discovery domain entities."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class DiagramGenerator(Protocol):  # pylint: disable=too-few-public-methods
    """Produces diagram description text."""

    def generate(self) -> str: ...


@runtime_checkable
class Diagram(Protocol):  # pylint: disable=too-few-public-methods
    """A named diagram definition able to create its text generator."""

    name: str

    def create_generator(self) -> DiagramGenerator: ...


@dataclass(frozen=True)
class DiagramDescriptor:
    """One discovered diagram, consumed read-only by the generation run."""

    name: str
    text_factory: Callable[[], str]

    def generate_text(self) -> str:
        return self.text_factory()

    @staticmethod
    def from_diagram(diagram: Diagram) -> DiagramDescriptor:
        return DiagramDescriptor(
            name=diagram.name,
            text_factory=lambda: diagram.create_generator().generate(),
        )


@dataclass(frozen=True)
class StaticTextGenerator:
    """Generator returning a fixed diagram description."""

    text: str

    def generate(self) -> str:
        return self.text


@dataclass(frozen=True)
class TextDiagram:
    """Diagram declared as data: a name plus its description text."""

    name: str
    text: str

    def create_generator(self) -> DiagramGenerator:
        return StaticTextGenerator(self.text)
