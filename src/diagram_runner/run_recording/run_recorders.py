"""Run-scoped log sinks."""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType
from typing import Protocol

RUN_LOGGER_NAME = "diagram_runner.run"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(message)s"


class RunRecorder(Protocol):
    """Protocol for the log sink acquired by one generation run."""

    def log(self, message: str, *, level: int = logging.INFO) -> None: ...

    def close(self) -> None: ...

    def __enter__(self) -> RunRecorder: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None: ...


class NullRecorder:
    """Recorder that discards every line."""

    def log(self, message: str, *, level: int = logging.INFO) -> None:
        return None

    def close(self) -> None:
        return None

    def __enter__(self) -> NullRecorder:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


class LoggingRecorder:
    """Recorder forwarding lines to the run logger, optionally mirrored into a log file."""

    def __init__(
        self, *, log_file: Path | str | None = None, logger: logging.Logger | None = None
    ) -> None:
        self._logger = logger or logging.getLogger(RUN_LOGGER_NAME)
        self._file_handler: logging.FileHandler | None = None
        self._previous_level: int | None = None
        self._closed = False
        if log_file is not None:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(log_path, encoding="utf-8")
            handler.setFormatter(logging.Formatter(_FILE_FORMAT))
            self._logger.addHandler(handler)
            if self._logger.getEffectiveLevel() > logging.INFO:
                self._previous_level = self._logger.level
                self._logger.setLevel(logging.INFO)
            self._file_handler = handler

    @property
    def closed(self) -> bool:
        return self._closed

    def log(self, message: str, *, level: int = logging.INFO) -> None:
        if self._closed:
            raise ValueError("Cannot log to a closed recorder.")
        self._logger.log(level, message)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._file_handler is not None:
            self._logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None
        if self._previous_level is not None:
            self._logger.setLevel(self._previous_level)

    def __enter__(self) -> LoggingRecorder:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
