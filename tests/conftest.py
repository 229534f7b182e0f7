"""Shared test fixtures."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _forget_loaded_components(tmp_path_factory: pytest.TempPathFactory) -> Iterator[None]:
    """Drop component modules loaded from temporary directories so they never leak between tests."""
    base_temp = tmp_path_factory.getbasetemp().resolve()
    before = set(sys.modules)
    yield
    for name in set(sys.modules) - before:
        module_file = getattr(sys.modules.get(name), "__file__", None)
        if module_file and Path(module_file).resolve().is_relative_to(base_temp):
            sys.modules.pop(name, None)
