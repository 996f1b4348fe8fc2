"""Download steps: write terminal content to disk through a `Downloader`."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Iterable, Iterator, List, Optional

import requests

from uniform_resource.core.errors import DownloadError
from uniform_resource.core.interfaces import Downloader, Transformer, TransformerContext
from uniform_resource.core.resource import (
    FollowedResource,
    Resource,
    is_followed_resource,
)
from uniform_resource.core.scraping.detector import (
    content_type_matches,
    is_terminal_result,
    is_terminal_text_content_result,
)
from uniform_resource.core.scraping.downloader import (
    DownloadErrorResult,
    DownloadResult,
    DownloadSkipResult,
    TypicalDownloader,
)
from uniform_resource.core.scraping.fetcher import Fetcher

logger = logging.getLogger(__name__)


class _CountingChunks:
    """Iterate chunks while counting the bytes handed out."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks = chunks
        self.size = 0

    def __iter__(self) -> Iterator[bytes]:
        for chunk in self._chunks:
            if chunk:
                self.size += len(chunk)
            yield chunk


class DownloadContent(Transformer[TransformerContext, Resource]):
    """Write the body of a followed resource to disk.

    Text bodies were retained while following and are written as UTF-8;
    other bodies are streamed again from the terminal URL. I/O failures
    become a `DownloadErrorResult` instead of an exception.
    """

    def __init__(
        self,
        downloader: Optional[Downloader] = None,
        fetcher: Optional[Fetcher] = None,
        chunk_size: int = 8192,
    ) -> None:
        self.downloader = downloader or TypicalDownloader()
        self.fetcher = fetcher or Fetcher()
        self.chunk_size = chunk_size

    def _download(self, resource: FollowedResource) -> DownloadResult:
        terminal = resource.terminal_result
        counter: Optional[_CountingChunks] = None
        try:
            if is_terminal_text_content_result(terminal):
                counter = _CountingChunks([terminal.content_text.encode("utf-8")])
                dest = self.downloader.write(resource, counter)
            else:
                with self.fetcher.stream_get(terminal.url) as resp:
                    resp.raise_for_status()
                    chunks = resp.iter_content(chunk_size=self.chunk_size)
                    counter = _CountingChunks(chunks)
                    dest = self.downloader.write(resource, counter)
            return self.downloader.finalize(resource, dest)
        except (OSError, requests.RequestException) as exc:
            logger.warning("Download of %s failed: %s", resource.uri, exc)
            size_expected = -1
            length = terminal.headers.get("Content-Length")
            if length and str(length).isdigit():
                size_expected = int(length)
            return DownloadErrorResult(
                size_expected=size_expected,
                size_downloaded=counter.size if counter else 0,
                error=DownloadError(resource.uri, exc),
            )

    async def transform(self, ctx: TransformerContext, resource: Resource) -> Resource:
        if is_followed_resource(resource) and is_terminal_result(
            resource.terminal_result
        ):
            result = await asyncio.to_thread(self._download, resource)
            return replace(resource, download=result)
        logger.info("Skipping download of %s: not traversed", resource.uri)
        return replace(
            resource,
            download=DownloadSkipResult(
                reason=(
                    f"Unable to download, resource [{resource.label}]"
                    f"({resource.uri}) was not traversed"
                ),
            ),
        )


class DownloadHttpContentTypes(Transformer[TransformerContext, Resource]):
    """Only download followed resources whose content type is allowed."""

    def __init__(self, download: DownloadContent, *content_types: str) -> None:
        self.download = download
        self.content_types: List[str] = [c.strip().lower() for c in content_types]

    def allows(self, content_type: Optional[str]) -> bool:
        return any(content_type_matches(content_type, c) for c in self.content_types)

    async def transform(self, ctx: TransformerContext, resource: Resource) -> Resource:
        if not is_followed_resource(resource):
            return resource
        terminal = resource.terminal_result
        if not is_terminal_result(terminal) or not self.allows(terminal.content_type):
            return resource
        return await self.download.transform(ctx, resource)


def pdfs_only(download: Optional[DownloadContent] = None) -> DownloadHttpContentTypes:
    return DownloadHttpContentTypes(download or DownloadContent(), "application/pdf")
