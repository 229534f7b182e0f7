"""Component loading domain exports."""

from .component_loader import ComponentLoadError, load_component

__all__ = ["ComponentLoadError", "load_component"]
