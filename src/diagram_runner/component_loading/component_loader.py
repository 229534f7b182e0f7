"""Component loading service."""

from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType

from diagram_runner.run_recording import NullRecorder, RunRecorder

PRIVATE_MODULE_PREFIX = "_diagram_component_"


class ComponentLoadError(Exception):
    """Raised when a component cannot be found or loaded."""


def load_component(identifier: str, recorder: RunRecorder | None = None) -> ModuleType:
    """Load a module file, package directory, or dotted module name.

    Raises:
      ComponentLoadError: If the component does not exist or raises while loading.
    """
    active_recorder = recorder or NullRecorder()
    if not identifier or not identifier.strip():
        raise ComponentLoadError("Component path must not be empty.")

    candidate = Path(identifier.strip())
    active_recorder.log(f"Loading component: {identifier}")
    if candidate.suffix == ".py" or candidate.exists():
        component = _load_from_path(candidate)
    else:
        component = _import_by_name(identifier.strip())
    active_recorder.log(f"Loaded component: {component.__name__}")
    return component


def _load_from_path(path: Path) -> ModuleType:
    resolved = path.resolve()
    if not resolved.exists():
        raise ComponentLoadError(f"Component not found: {resolved}")

    if resolved.is_dir():
        init_file = resolved / "__init__.py"
        if not init_file.is_file():
            raise ComponentLoadError(f"Component directory is not a Python package: {resolved}")
        spec = importlib.util.spec_from_file_location(
            _module_name_for(resolved.name, init_file),
            init_file,
            submodule_search_locations=[str(resolved)],
        )
    else:
        if resolved.suffix != ".py":
            raise ComponentLoadError(f"Component file is not a Python module: {resolved}")
        spec = importlib.util.spec_from_file_location(
            _module_name_for(resolved.stem, resolved), resolved
        )

    if spec is None or spec.loader is None:
        raise ComponentLoadError(f"Component is not loadable: {resolved}")

    module = importlib.util.module_from_spec(spec)
    previous = sys.modules.get(spec.name)
    sys.modules[spec.name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        _restore_module(spec.name, previous)
        raise ComponentLoadError(f"Component failed to load: {resolved}: {exc}") from exc
    return module


def _module_name_for(preferred: str, source_file: Path) -> str:
    """Return the preferred name unless it already belongs to a module from another file."""
    existing = sys.modules.get(preferred)
    if existing is None:
        return preferred
    existing_file = getattr(existing, "__file__", None)
    if existing_file and Path(existing_file).resolve() == source_file:
        return preferred
    return f"{PRIVATE_MODULE_PREFIX}{preferred}"


def _import_by_name(module_name: str) -> ModuleType:
    try:
        return importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        raise ComponentLoadError(f"Component not found: {module_name}") from exc
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise ComponentLoadError(f"Component failed to load: {module_name}: {exc}") from exc


def _restore_module(name: str, previous: ModuleType | None) -> None:
    if previous is None:
        sys.modules.pop(name, None)
    else:
        sys.modules[name] = previous
