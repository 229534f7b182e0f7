"""Image persistence domain exports."""

from .image_writer import ImagePersistenceError, sanitize_file_name, save_image

__all__ = ["ImagePersistenceError", "sanitize_file_name", "save_image"]
