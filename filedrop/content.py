"""Content type resolution.

Precedence is explicit type, then filename extension, then the leading
bytes of the payload. Resolution never fails; an unknown type is ``""``.
"""
import mimetypes
from pathlib import PurePosixPath

import filetype

# Enough for every signature filetype knows about.
SNIFF_BYTES = 262

_EXT_BY_MIME = {
    "text/plain": ".txt",
    "image/png": ".png",
    "image/jpeg": ".jpg",
}


def _essence(mime_type: str) -> str:
    return mime_type.split(";", 1)[0].strip().lower()


def type_from_filename(filename: str) -> str:
    if not filename or not PurePosixPath(filename).suffix:
        return ""
    guessed, _ = mimetypes.guess_type(filename, strict=False)
    return guessed or ""


def sniff_type(head: bytes) -> str:
    if not head:
        return ""
    return filetype.guess_mime(head[:SNIFF_BYTES]) or ""


def resolve_type(explicit_type: str | None, filename: str | None = "", head: bytes = b"") -> str:
    explicit_type = (explicit_type or "").strip()
    if explicit_type:
        return explicit_type
    return type_from_filename(filename or "") or sniff_type(head)


def extension_for(mime_type: str | None) -> str | None:
    """Extension (with leading dot) for a MIME type, or None when unknown."""
    essence = _essence(mime_type or "")
    if not essence:
        return None
    ext = _EXT_BY_MIME.get(essence)
    if ext:
        return ext
    return mimetypes.guess_extension(essence, strict=False)
