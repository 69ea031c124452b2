"""Byte-level content sniffing.

Files are classified by what their bytes look like, never by name or
extension. Sniffing produces a media type string; the tables below map media
types onto the validation strategy.
"""

from __future__ import annotations

import hashlib
import json
import re
from enum import Enum
from pathlib import Path

# Media types whose changes go through the normalized line diff.
TEXTUAL_MEDIA_TYPES = (
    "text/",
    "application/x-shellscript",
    "application/x-desktop",
    "application/mbox",
    "application/xml",
    "application/json",
    "image/svg+xml",
)

# Media types that may change freely.
EXEMPT_MEDIA_TYPES = ("image/",)

OCTET_STREAM = "application/octet-stream"

_IMAGE_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x00\x00\x01\x00", "image/vnd.microsoft.icon"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
    (b"BM", "image/bmp"),
)

_SHEBANG_SH = re.compile(r"^#!\s*\S*(?:/|\s)(?:ba|da|z|k)?sh\b")
_XML_ROOT = re.compile(r"<(?![?!])([A-Za-z_][\w:.-]*)")


class ContentClass(Enum):
    TEXTUAL_DECLARATION = "textual_declaration"
    EXEMPT_BINARY = "exempt_binary"
    OPAQUE_BINARY = "opaque_binary"


def _decode_text(data: bytes) -> str | None:
    if b"\x00" in data:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


def _sniff_image(data: bytes) -> str | None:
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    for signature, media_type in _IMAGE_SIGNATURES:
        if data.startswith(signature):
            return media_type
    return None


def _sniff_text(text: str) -> str:
    head = text.lstrip("\ufeff")
    first_line = head.split("\n", 1)[0]
    if _SHEBANG_SH.match(first_line):
        return "application/x-shellscript"
    stripped = head.lstrip()
    if stripped.startswith("[Desktop Entry]"):
        return "application/x-desktop"
    if head.startswith("From "):
        return "application/mbox"
    if stripped[:1] in ("{", "["):
        try:
            json.loads(stripped)
        except ValueError:
            pass
        else:
            return "application/json"
    if stripped.startswith("<"):
        root = _XML_ROOT.search(stripped)
        if root is not None and root.group(1).lower() == "svg":
            return "image/svg+xml"
        if stripped.startswith("<?xml") or root is not None:
            return "application/xml"
    return "text/plain"


def sniff_media_type(data: bytes) -> str:
    """Return a media type for raw file content.

    Text is detected first so that a text file cannot pass for an image by
    starting with an ASCII image signature. Empty content is ``text/plain``.
    """
    text = _decode_text(data)
    if text is not None:
        return _sniff_text(text)
    return _sniff_image(data) or OCTET_STREAM


def _matches(media_type: str, table: tuple[str, ...]) -> bool:
    return any(media_type == item or media_type.startswith(item) for item in table)


def classify_media_type(media_type: str) -> ContentClass:
    if _matches(media_type, TEXTUAL_MEDIA_TYPES):
        return ContentClass.TEXTUAL_DECLARATION
    if _matches(media_type, EXEMPT_MEDIA_TYPES):
        return ContentClass.EXEMPT_BINARY
    return ContentClass.OPAQUE_BINARY


def classify_content(data: bytes) -> ContentClass:
    return classify_media_type(sniff_media_type(data))


def content_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def file_hash(path: Path) -> str:
    return content_hash(path.read_bytes())
