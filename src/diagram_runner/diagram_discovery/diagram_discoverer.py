"""Diagram discovery service."""

from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import Any

from diagram_runner.run_recording import NullRecorder, RunRecorder

from .diagram_models import Diagram, DiagramDescriptor


def discover_diagrams(
    component: ModuleType, recorder: RunRecorder | None = None
) -> list[DiagramDescriptor]:
    """Collect every diagram declared by a component, in definition order.

    Module-level diagram instances are reported as they are. Concrete classes
    defined in the component that satisfy the diagram protocol and take no
    constructor arguments are instantiated. Packages are scanned together with
    all of their submodules; a submodule that fails to import is logged and
    skipped.
    """
    active_recorder = recorder or NullRecorder()
    seen: set[int] = set()
    descriptors: list[DiagramDescriptor] = []
    for module in _iter_modules(component, active_recorder):
        for diagram in _diagrams_in_module(module, active_recorder):
            if id(diagram) in seen:
                continue
            seen.add(id(diagram))
            descriptors.append(DiagramDescriptor.from_diagram(diagram))
            active_recorder.log(f"Discovered diagram: {diagram.name}", level=logging.DEBUG)
    active_recorder.log(f"Discovered {len(descriptors)} diagram(s) in {component.__name__}")
    return descriptors


def _iter_modules(component: ModuleType, recorder: RunRecorder):
    yield component
    search_path = getattr(component, "__path__", None)
    if search_path is None:
        return
    for module_info in pkgutil.walk_packages(
        search_path, prefix=f"{component.__name__}.", onerror=lambda name: None
    ):
        try:
            yield importlib.import_module(module_info.name)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            recorder.log(
                f"Skipping module {module_info.name}: {exc}",
                level=logging.WARNING,
            )


def _diagrams_in_module(module: ModuleType, recorder: RunRecorder) -> list[Diagram]:
    diagrams: list[Diagram] = []
    for attribute_name, value in list(vars(module).items()):
        if attribute_name.startswith("_"):
            continue
        if inspect.isclass(value):
            instance = _instantiate_diagram_class(value, module, recorder)
            if instance is not None:
                diagrams.append(instance)
        elif _is_diagram(value):
            diagrams.append(value)
    return diagrams


def _instantiate_diagram_class(
    candidate: type, module: ModuleType, recorder: RunRecorder
) -> Diagram | None:
    if candidate.__module__ != module.__name__:
        return None
    if inspect.isabstract(candidate) or getattr(candidate, "_is_protocol", False):
        return None
    if not callable(getattr(candidate, "create_generator", None)):
        return None
    if not _has_no_required_arguments(candidate):
        return None
    try:
        instance = candidate()
    except Exception as exc:  # pylint: disable=broad-exception-caught
        recorder.log(
            f"Skipping diagram class {candidate.__qualname__}: {exc}",
            level=logging.WARNING,
        )
        return None
    return instance if _is_diagram(instance) else None


def _has_no_required_arguments(candidate: type) -> bool:
    try:
        signature = inspect.signature(candidate)
    except (TypeError, ValueError):
        return False
    return all(
        parameter.default is not inspect.Parameter.empty
        or parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for parameter in signature.parameters.values()
    )


def _is_diagram(value: Any) -> bool:
    if inspect.isclass(value) or inspect.ismodule(value):
        return False
    return isinstance(getattr(value, "name", None), str) and isinstance(value, Diagram)
