"""Image format sniffing by magic bytes.

Declared content types come from the remote server (or the uploader) and are
not trusted on their own; these helpers look at the bytes instead.
"""

from typing import Optional

# Binary signatures checked against the start of the content.
_SIGNATURES: list[tuple[bytes, str]] = [
    (b"\x89PNG", "png"),
    (b"\xff\xd8\xff", "jpeg"),
    (b"GIF", "gif"),
    (b"\x00\x00\x01\x00", "ico"),
]

FORMAT_CONTENT_TYPES = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "ico": "image/x-icon",
    "svg": "image/svg+xml",
}

FORMAT_EXTENSIONS = {
    "png": "png",
    "jpeg": "jpg",
    "gif": "gif",
    "webp": "webp",
    "ico": "ico",
    "svg": "svg",
}

_SVG_SNIFF_BYTES = 1024


def detect_image_format(data: bytes) -> Optional[str]:
    """Identify the image format of ``data``.

    Args:
        data: Raw file content (only the head is inspected)

    Returns:
        One of ``png``, ``jpeg``, ``gif``, ``webp``, ``ico``, ``svg`` or None
    """
    for signature, fmt in _SIGNATURES:
        if data.startswith(signature):
            return fmt

    if data.startswith(b"RIFF") and data[8:12] == b"WEBP":
        return "webp"

    head = data[:_SVG_SNIFF_BYTES].lstrip(b"\xef\xbb\xbf \t\r\n")
    if head.startswith(b"<?xml") or b"<svg" in head.lower():
        return "svg"

    return None


def is_valid_image(data: bytes) -> bool:
    return detect_image_format(data) is not None


def extension_for_content_type(content_type: str) -> Optional[str]:
    """Map a declared content type to a file extension.

    Returns None when the type does not name a known image format.
    """
    ct = content_type.lower()
    if "svg" in ct:
        return "svg"
    if "jpeg" in ct or "jpg" in ct:
        return "jpg"
    if "gif" in ct:
        return "gif"
    if "webp" in ct:
        return "webp"
    if "ico" in ct:
        return "ico"
    if "png" in ct:
        return "png"
    return None


def resolve_extension(content_type: str | None, data: bytes) -> str:
    """Pick the extension for verified image ``data``.

    The declared type wins when it names a known format, otherwise the
    sniffed format is used, and ``png`` is the last resort.
    """
    if content_type:
        ext = extension_for_content_type(content_type)
        if ext:
            return ext
    fmt = detect_image_format(data)
    return FORMAT_EXTENSIONS.get(fmt, "png") if fmt else "png"
