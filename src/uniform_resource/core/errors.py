"""Exception taxonomy for link resolution and enrichment."""

from __future__ import annotations

from typing import Sequence


class UniformResourceError(Exception):
    """Base class for every error raised by this package."""


class ResolutionError(UniformResourceError):
    """A link could not be resolved to a terminal resource."""


class MalformedRedirectError(ResolutionError):
    """A redirect status was returned without a usable ``Location`` header."""

    def __init__(self, url: str, status: int):
        super().__init__(
            f"{url} responded with status {status} but no location header"
        )
        self.url = url
        self.status = status


class RedirectDepthExceededError(ResolutionError):
    """The redirect chain is longer than the configured maximum."""

    def __init__(self, url: str, max_depth: int, visits: Sequence = ()):
        super().__init__(f"Exceeded max redirect depth of {max_depth} for {url}")
        self.url = url
        self.max_depth = max_depth
        self.visits = tuple(visits)


class DownloadError(UniformResourceError):
    """Writing a resource body to disk failed."""

    def __init__(self, url: str, cause: BaseException):
        super().__init__(f"Unable to download {url}: {cause}")
        self.url = url
        self.cause = cause


class FetchTimeoutError(ResolutionError):
    """A single hop took longer than the configured fetch timeout."""

    def __init__(self, url: str, timeout_ms: int):
        super().__init__(f"Fetching {url} took longer than {timeout_ms} ms")
        self.url = url
        self.timeout_ms = timeout_ms
