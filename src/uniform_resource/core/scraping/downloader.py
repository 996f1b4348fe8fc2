"""
Downloader: write a followed resource body to disk.

The idea:

- write the body in chunks (stream) so large files never sit in memory;
- save it under the destination directory with a unique (uuid4) name;
- once written, sniff the real file type from its first bytes and rename
  the file with the matching extension;
- describe the attempt with exactly one `DownloadResult` variant.

Notes:
- "expected size" comes from the Content-Length header of the terminal
  response, -1 when the server did not send one.
- a SHA-256 digest of the written file is recorded to check integrity.
"""

from __future__ import annotations

import hashlib
import logging
import os
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import ClassVar, Dict, Iterable, Optional
from urllib.parse import unquote

from uniform_resource.core.config import DownloadOptions
from uniform_resource.core.interfaces import Downloader
from uniform_resource.core.resource import FollowedResource
from uniform_resource.core.scraping.sniffer import FileType, detect

logger = logging.getLogger(__name__)


class DownloadOutcome(str, Enum):
    SKIPPED = "skipped"
    ERROR = "error"
    SUCCESS = "success"
    TYPED = "typed"
    INDETERMINATE = "indeterminate"


@dataclass(frozen=True)
class ContentDisposition:
    type: str
    filename: Optional[str] = None
    parameters: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class DownloadResult:
    outcome: ClassVar[DownloadOutcome]
    size_expected: int = -1


@dataclass(frozen=True, kw_only=True)
class DownloadSkipResult(DownloadResult):
    outcome: ClassVar[DownloadOutcome] = DownloadOutcome.SKIPPED
    reason: str


@dataclass(frozen=True, kw_only=True)
class DownloadErrorResult(DownloadResult):
    outcome: ClassVar[DownloadOutcome] = DownloadOutcome.ERROR
    size_downloaded: int
    error: BaseException


@dataclass(frozen=True, kw_only=True)
class DownloadSuccessResult(DownloadResult):
    outcome: ClassVar[DownloadOutcome] = DownloadOutcome.SUCCESS
    dest_path: Path
    stats: os.stat_result
    sha256: Optional[str] = None
    content_disposition: Optional[ContentDisposition] = None


@dataclass(frozen=True, kw_only=True)
class DownloadFileResult(DownloadSuccessResult):
    outcome: ClassVar[DownloadOutcome] = DownloadOutcome.TYPED
    file_type: FileType


@dataclass(frozen=True, kw_only=True)
class DownloadIndeterminateFileResult(DownloadSuccessResult):
    outcome: ClassVar[DownloadOutcome] = DownloadOutcome.INDETERMINATE
    unknown_file_type: str


def is_download_skip_result(o: object) -> bool:
    return isinstance(o, DownloadResult) and o.outcome is DownloadOutcome.SKIPPED


def is_download_error_result(o: object) -> bool:
    return isinstance(o, DownloadResult) and o.outcome is DownloadOutcome.ERROR


def is_download_success_result(o: object) -> bool:
    return isinstance(o, DownloadSuccessResult)


def is_download_file_result(o: object) -> bool:
    return isinstance(o, DownloadResult) and o.outcome is DownloadOutcome.TYPED


def is_download_indeterminate_result(o: object) -> bool:
    return isinstance(o, DownloadResult) and o.outcome is DownloadOutcome.INDETERMINATE


def parse_content_disposition(header: Optional[str]) -> Optional[ContentDisposition]:
    """Parse a Content-Disposition header; ``filename*`` wins over ``filename``."""
    if not header:
        return None
    parts = [segment.strip() for segment in header.split(";") if segment.strip()]
    if not parts:
        return None
    disposition_type = parts[0].lower()
    params: Dict[str, str] = {}
    for part in parts[1:]:
        name, eq, value = part.partition("=")
        if not eq:
            continue
        params[name.strip().lower()] = value.strip().strip('"')

    filename = None
    extended = params.get("filename*")
    if extended:
        _, _, encoded = extended.partition("''")
        filename = unquote(encoded or extended).strip('"') or None
    if not filename:
        filename = params.get("filename") or None
    return ContentDisposition(
        type=disposition_type, filename=filename, parameters=params
    )


def _sha256_of(path: Path, chunk_size: int) -> str:
    hasher = hashlib.sha256()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(chunk_size), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


class TypicalDownloader(Downloader):
    """Download into `options.destination_directory`.

    - `write` streams chunks into ``<destination>/<uuid4 hex>``;
    - `finalize` stats the file, sniffs its type and, when known, renames it
      to ``<uuid4 hex>.<extension>``.
    """

    def __init__(self, options: Optional[DownloadOptions] = None):
        self.options = options or DownloadOptions()
        self.dest_dir = Path(self.options.destination_directory)
        if self.options.create_destination:
            self.dest_dir.mkdir(parents=True, exist_ok=True)

    def write(self, resource: FollowedResource, chunks: Iterable[bytes]) -> Path:
        out_path = self.dest_dir / uuid.uuid4().hex
        # binary mode so any kind of payload can be written
        try:
            with open(out_path, "wb") as fh:
                for chunk in chunks:
                    if not chunk:
                        continue
                    fh.write(chunk)
        except BaseException:
            # an interrupted transfer leaves nothing behind
            out_path.unlink(missing_ok=True)
            raise
        return out_path

    def finalize(self, resource: FollowedResource, dest_path: Path) -> DownloadResult:
        headers = getattr(resource.terminal_result, "headers", None) or {}
        size_expected = -1
        size_header = headers.get("Content-Length")
        if size_header and str(size_header).strip().isdigit():
            size_expected = int(size_header)

        stats = os.stat(dest_path)
        digest = _sha256_of(dest_path, self.options.chunk_size)
        if not self.options.determine_file_type:
            return DownloadSuccessResult(
                size_expected=size_expected,
                dest_path=dest_path,
                stats=stats,
                sha256=digest,
            )

        disposition = parse_content_disposition(headers.get("Content-Disposition"))
        file_type = detect(dest_path)
        if file_type is None:
            return DownloadIndeterminateFileResult(
                size_expected=size_expected,
                dest_path=dest_path,
                stats=stats,
                sha256=digest,
                content_disposition=disposition,
                unknown_file_type=f"Unable to determine type of file {dest_path}",
            )

        final_path = dest_path.with_name(f"{dest_path.name}.{file_type.extension}")
        os.replace(dest_path, final_path)
        logger.debug(
            "Downloaded %s to %s (%s)", resource.uri, final_path, file_type.mime
        )
        return DownloadFileResult(
            size_expected=size_expected,
            dest_path=final_path,
            stats=stats,
            sha256=digest,
            content_disposition=disposition,
            file_type=file_type,
        )
