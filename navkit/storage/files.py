"""Local uploads directory: icon persistence, uploads and safe serving."""

import asyncio
import logging
import mimetypes
import re
import secrets
import time
from collections.abc import Sequence
from pathlib import Path

from navkit.core.exceptions import IconInvalidError, PersistenceError, UploadError
from navkit.core.models import StorageConfig, StoredFile
from navkit.storage.images import (
    FORMAT_CONTENT_TYPES,
    detect_image_format,
    is_valid_image,
    resolve_extension,
)

logger = logging.getLogger(__name__)

ICONS_DIR = "icons"
CATEGORIES_DIR = "categories"
SERVED_DIRS = frozenset({ICONS_DIR, CATEGORIES_DIR, "images"})

UPLOAD_CONTENT_TYPES = frozenset(
    {"image/jpeg", "image/png", "image/gif", "image/webp", "image/svg+xml"}
)
UPLOAD_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp", "svg"})
SERVED_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "svg", "webp", "ico"})
MAX_FILENAME_LENGTH = 255

_SERVED_NAME = re.compile(
    r"^(?:icon_)?\d+(?:_[0-9a-f]+)?\.(?:png|jpe?g|gif|svg|webp|ico)$", re.IGNORECASE
)


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def generate_icon_filename(extension: str) -> str:
    """Build a collision-resistant name for a downloaded icon."""
    return f"icon_{_timestamp_ms()}_{secrets.token_hex(4)}.{extension}"


def generate_upload_filename(extension: str) -> str:
    """Build an unguessable name for an uploaded image."""
    return f"{_timestamp_ms()}_{secrets.token_hex(16)}.{extension}"


class FileStore:
    """Writes and serves images under the configured uploads root.

    All filesystem work runs in a worker thread so concurrent acquisitions
    on the event loop are not blocked.
    """

    def __init__(self, config: StorageConfig | None = None) -> None:
        """Initialize store.

        Args:
            config: Storage configuration (defaults to ``./public/uploads``)
        """
        self.config = config or StorageConfig()
        self.root = Path(self.config.upload_root)

    def url_for(self, subdir: str, filename: str) -> str:
        prefix = self.config.url_prefix.rstrip("/")
        return f"{prefix}/{subdir}/{filename}"

    async def save_icon(self, content: bytes, content_type: str | None = None) -> StoredFile:
        """Persist verified icon bytes and re-check what landed on disk.

        Args:
            content: Icon bytes
            content_type: Declared content type, used to pick the extension

        Returns:
            Stored file description with its public URL

        Raises:
            IconInvalidError: If ``content`` is not a recognizable image
            PersistenceError: If writing fails or the written file does not verify
        """
        fmt = detect_image_format(content)
        if fmt is None:
            raise IconInvalidError("Content does not match any image signature", source="store")

        extension = resolve_extension(content_type, content)
        filename = generate_icon_filename(extension)
        path = await self._write_verified(ICONS_DIR, filename, content)

        logger.info(f"Icon saved: {filename} ({len(content)} bytes)")
        return StoredFile(
            filename=filename,
            path=path,
            url=self.url_for(ICONS_DIR, filename),
            content_type=FORMAT_CONTENT_TYPES[fmt],
            size=len(content),
        )

    async def save_upload(
        self,
        content: bytes,
        declared_type: str,
        filename: str,
        kind: str = "icon",
    ) -> StoredFile:
        """Validate and store an image uploaded by an administrator.

        Args:
            content: Uploaded bytes
            declared_type: Content type claimed by the client
            filename: Original client-side filename
            kind: ``icon``/``service`` (stored in icons) or ``category``

        Returns:
            Stored file description with its public URL

        Raises:
            UploadError: If any validation check fails
            PersistenceError: If the file cannot be written
        """
        if declared_type not in UPLOAD_CONTENT_TYPES:
            raise UploadError(
                f"Unsupported file type {declared_type!r}; use JPG, PNG, GIF, WEBP or SVG",
                source="upload",
            )
        if len(content) > self.config.max_upload_bytes:
            raise UploadError(
                f"File exceeds {self.config.max_upload_bytes} bytes", source="upload"
            )
        if len(filename) > MAX_FILENAME_LENGTH:
            raise UploadError("Filename too long", source="upload")

        fmt = detect_image_format(content)
        if fmt is None or FORMAT_CONTENT_TYPES[fmt] != declared_type:
            raise UploadError(
                f"Content does not match declared type {declared_type}", source="upload"
            )

        _, dot, extension = filename.rpartition(".")
        extension = extension.lower()
        if not dot or extension not in UPLOAD_EXTENSIONS:
            raise UploadError(f"Unsupported file extension in {filename!r}", source="upload")

        subdir = CATEGORIES_DIR if kind == "category" else ICONS_DIR
        stored_name = generate_upload_filename(extension)
        path = await self._write_verified(subdir, stored_name, content)

        logger.info(f"Upload saved: {subdir}/{stored_name} ({len(content)} bytes)")
        return StoredFile(
            filename=stored_name,
            path=path,
            url=self.url_for(subdir, stored_name),
            content_type=declared_type,
            size=len(content),
        )

    async def read_served(self, parts: Sequence[str]) -> tuple[bytes, str]:
        """Load a file requested as ``<url_prefix>/<parts...>``.

        Args:
            parts: Path segments after the uploads prefix

        Returns:
            File bytes and the MIME type to serve them with

        Raises:
            UploadError: If the path or file content is not acceptable
            FileNotFoundError: If no such file exists
        """
        joined = "/".join(parts)
        if ".." in joined or "\\" in joined:
            raise UploadError("Invalid path", source="serve")
        if len(parts) < 2 or parts[0] not in SERVED_DIRS:
            raise UploadError("Invalid path", source="serve")

        name = parts[-1]
        if not _SERVED_NAME.match(name):
            raise UploadError("Invalid file name format", source="serve")
        extension = name.rsplit(".", 1)[-1].lower()
        if extension not in SERVED_EXTENSIONS:
            raise UploadError("File type not allowed", source="serve")

        path = self.root.joinpath(*parts)
        data = await asyncio.to_thread(self._read_file, path)

        if extension != "svg" and not is_valid_image(data):
            raise UploadError("Invalid image file", source="serve")

        mime_type, _ = mimetypes.guess_type(name)
        return data, mime_type or "application/octet-stream"

    async def _write_verified(self, subdir: str, filename: str, content: bytes) -> Path:
        directory = self.root / subdir
        path = directory / filename
        try:
            await asyncio.to_thread(self._write_file, directory, path, content)
            written = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            await self._discard(path)
            raise PersistenceError(f"Failed to write {path}: {e}", source="store") from e

        if written != content or not is_valid_image(written):
            await self._discard(path)
            raise PersistenceError(f"Integrity check failed for {path}", source="store")
        return path

    async def _discard(self, path: Path) -> None:
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove {path}: {e}")

    @staticmethod
    def _write_file(directory: Path, path: Path, content: bytes) -> None:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    def _read_file(self, path: Path) -> bytes:
        if not path.resolve().is_relative_to(self.root.resolve()):
            raise UploadError("Invalid path", source="serve")
        if not path.is_file():
            raise FileNotFoundError(path)
        return path.read_bytes()

