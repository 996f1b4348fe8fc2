"""Sniff the type of a downloaded file from its leading bytes.

Content-Type headers lie often enough that downloads are typed by their
signature instead. Returns `None` when no known signature matches.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

HEAD_BYTES = 2048


@dataclass(frozen=True)
class FileType:
    mime: str
    extension: str


# (offset, signature, type); first match wins so longer signatures go first
_SIGNATURES = (
    (0, b"%PDF-", FileType("application/pdf", "pdf")),
    (0, b"\x89PNG\r\n\x1a\n", FileType("image/png", "png")),
    (0, b"\xff\xd8\xff", FileType("image/jpeg", "jpg")),
    (0, b"GIF87a", FileType("image/gif", "gif")),
    (0, b"GIF89a", FileType("image/gif", "gif")),
    (0, b"\x00\x00\x01\x00", FileType("image/x-icon", "ico")),
    (0, b"\x1f\x8b", FileType("application/gzip", "gz")),
    (0, b"PK\x03\x04", FileType("application/zip", "zip")),
    (0, b"Rar!\x1a\x07", FileType("application/x-rar-compressed", "rar")),
    (0, b"7z\xbc\xaf\x27\x1c", FileType("application/x-7z-compressed", "7z")),
    (0, b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1", FileType("application/x-cfb", "cfb")),
    (0, b"ID3", FileType("audio/mpeg", "mp3")),
    (0, b"OggS", FileType("audio/ogg", "ogg")),
    (0, b"fLaC", FileType("audio/x-flac", "flac")),
    (4, b"ftyp", FileType("video/mp4", "mp4")),
    (0, b"\x1a\x45\xdf\xa3", FileType("video/webm", "webm")),
)

# OOXML documents are zip archives whose first entry name gives them away
_OOXML = (
    (b"word/", FileType(
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "docx",
    )),
    (b"xl/", FileType(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "xlsx",
    )),
    (b"ppt/", FileType(
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        "pptx",
    )),
)


def sniff_bytes(head: bytes) -> Optional[FileType]:
    if not head:
        return None

    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return FileType("image/webp", "webp")
    if head[:4] == b"RIFF" and head[8:12] == b"WAVE":
        return FileType("audio/wav", "wav")

    for offset, signature, file_type in _SIGNATURES:
        if head[offset : offset + len(signature)] == signature:
            if file_type.extension == "zip":
                for marker, ooxml in _OOXML:
                    if marker in head[30:HEAD_BYTES]:
                        return ooxml
            return file_type

    stripped = head.lstrip()
    if stripped.startswith(b"\xef\xbb\xbf"):
        stripped = stripped[3:].lstrip()
    prefix = stripped[:64].lower()
    if prefix.startswith(b"<!doctype html") or prefix.startswith(b"<html"):
        return FileType("text/html", "html")
    if prefix.startswith(b"<?xml"):
        if b"<svg" in stripped[:HEAD_BYTES].lower():
            return FileType("image/svg+xml", "svg")
        return FileType("application/xml", "xml")
    if prefix.startswith(b"<svg"):
        return FileType("image/svg+xml", "svg")
    return None


def detect(path: Union[str, Path]) -> Optional[FileType]:
    """Return the sniffed `FileType` of the file at `path`."""
    with open(path, "rb") as fh:
        return sniff_bytes(fh.read(HEAD_BYTES))
