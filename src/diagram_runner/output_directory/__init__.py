"""Output directory domain exports."""

from .directory_preparation import OutputDirectoryError, prepare_output_directory

__all__ = ["OutputDirectoryError", "prepare_output_directory"]
