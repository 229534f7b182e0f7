"""Run recording domain exports."""

from .run_recorders import RUN_LOGGER_NAME, LoggingRecorder, NullRecorder, RunRecorder

__all__ = ["RUN_LOGGER_NAME", "LoggingRecorder", "NullRecorder", "RunRecorder"]
