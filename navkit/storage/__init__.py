"""Image verification and the local uploads store."""

from navkit.storage.files import FileStore
from navkit.storage.images import detect_image_format, is_valid_image, resolve_extension

__all__ = ["FileStore", "detect_image_format", "is_valid_image", "resolve_extension"]
