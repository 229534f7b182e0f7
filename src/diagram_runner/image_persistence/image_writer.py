"""Rendered image persistence service."""

from __future__ import annotations

import re
from pathlib import Path

from diagram_runner.image_rendering import RenderedImage

DEFAULT_REPLACEMENT = "_"

# Characters rejected in a path segment by Windows, plus the POSIX separator and control codes.
ILLEGAL_PATH_CHARACTERS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


class ImagePersistenceError(Exception):
    """Raised when a rendered image cannot be written."""


def sanitize_file_name(name: str, replacement: str = DEFAULT_REPLACEMENT) -> str:
    """Replace every character that is illegal in a file name with `replacement`."""
    if ILLEGAL_PATH_CHARACTERS.search(replacement):
        raise ValueError(f"Replacement must be a legal file name character: {replacement!r}")
    sanitized = ILLEGAL_PATH_CHARACTERS.sub(replacement, name)
    if sanitized in ("", ".", ".."):
        return replacement * max(len(sanitized), 1)
    return sanitized


def save_image(image: RenderedImage, output_directory: Path, diagram_name: str) -> Path:
    """Write the image bytes as `output_directory / sanitized name`, overwriting any existing file.

    Raises:
      ImagePersistenceError: If the file cannot be written.
    """
    destination = Path(output_directory) / sanitize_file_name(diagram_name)
    try:
        destination.write_bytes(image.data)
    except OSError as exc:
        raise ImagePersistenceError(f"Cannot write image {destination}: {exc}") from exc
    return destination
