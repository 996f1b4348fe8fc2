"""Redirect resolver: chase HTTP 3xx and meta-refresh redirects hop by hop.

`RedirectFollower.follow` returns every hop as a `VisitResult` so callers can
audit the whole chain, not only the final URL. Each hop is exactly one
request with transport-level redirects disabled.
"""

from __future__ import annotations

import asyncio
import html
import logging
import re
import time
from typing import List, Optional
from urllib.parse import urljoin

import requests
from requests.structures import CaseInsensitiveDict

from uniform_resource.core.config import FollowOptions
from uniform_resource.core.errors import (
    FetchTimeoutError,
    MalformedRedirectError,
    RedirectDepthExceededError,
)
from uniform_resource.core.scraping.detector import MimeType, is_redirect_result
from uniform_resource.core.scraping.fetcher import Fetcher
from uniform_resource.core.scraping.normalizer import (
    prefix_with_http,
    remove_tracking_codes,
)
from uniform_resource.core.scraping.visits import (
    ContentRedirectResult,
    HttpRedirectResult,
    TerminalResult,
    TerminalTextContentResult,
    VisitError,
    VisitResult,
)

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})
BODY_CHUNK_SIZE = 1024

# Best effort: attribute order and quoting other than this are not detected.
META_REFRESH_PATTERN = re.compile(
    r"""(CONTENT|content)=["']0;\s*(URL|url)=(.*?)(["']\s*>)""",
    re.IGNORECASE,
)


def extract_meta_refresh_url(text: str) -> Optional[str]:
    match = META_REFRESH_PATTERN.search(text)
    if not match:
        return None
    target = html.unescape(match.group(3)).strip()
    return target or None


class RedirectFollower:
    """Follow one link through its redirect chain.

    Usage:
        follower = RedirectFollower()
        visits = await follower.follow("https://t.co/abc")

    The `fetcher` is injectable so tests can replay canned responses.
    """

    def __init__(
        self,
        fetcher: Optional[Fetcher] = None,
        options: Optional[FollowOptions] = None,
    ) -> None:
        self.options = options or FollowOptions()
        self.fetcher = fetcher or Fetcher(
            timeout=self.options.timeout_seconds,
            ua_pool=[self.options.user_agent],
        )

    async def follow(
        self, origin_url: str, options: Optional[FollowOptions] = None
    ) -> List[VisitResult]:
        """Resolve `origin_url`, one `VisitResult` per hop.

        The list always ends with a terminal result or a `VisitError`. Each
        hop, body included, must complete within `fetch_timeout_ms`; a slower
        hop ends the chain with a `VisitError`.
        Raises `RedirectDepthExceededError` when the chain is longer than
        `max_redirect_depth`.
        """
        opts = options or self.options
        visits: List[VisitResult] = []
        url = origin_url
        position = 1
        while True:
            if position > opts.max_redirect_depth:
                raise RedirectDepthExceededError(
                    origin_url, opts.max_redirect_depth, visits
                )
            try:
                visit = await asyncio.wait_for(
                    asyncio.to_thread(self.visit, url, opts),
                    timeout=opts.timeout_seconds,
                )
            except asyncio.TimeoutError:
                target = self._target(url, opts)
                logger.warning("Visit to %s timed out", target)
                error = FetchTimeoutError(target, opts.fetch_timeout_ms)
                visit = VisitError(url=target, error=error)
            visits.append(visit)
            position += 1
            logger.debug(
                "Hop %d of %s: %s %s",
                position - 1,
                origin_url,
                visit.kind.value,
                visit.url,
            )
            if not is_redirect_result(visit):
                break
            url = visit.redirect_url
        return visits

    def visit(self, url: str, options: Optional[FollowOptions] = None) -> VisitResult:
        """Issue a single request and classify the response.

        Network and parsing failures are returned as `VisitError`.
        """
        opts = options or self.options
        target = self._target(url, opts)
        try:
            return self._classify(target, opts)
        except (
            requests.RequestException,
            FetchTimeoutError,
            ValueError,
            UnicodeError,
        ) as exc:
            logger.warning("Visit to %s failed: %s", target, exc)
            return VisitError(url=target, error=exc)

    def _target(self, url: str, opts: FollowOptions) -> str:
        target = prefix_with_http(url)
        if opts.strip_tracking_codes:
            target = remove_tracking_codes(target)
        return target

    def _read_text(
        self, resp, mime_type: MimeType, url: str, opts: FollowOptions, deadline: float
    ) -> str:
        """Read the whole body, failing once the hop deadline has passed."""
        chunks = []
        for chunk in resp.iter_content(chunk_size=BODY_CHUNK_SIZE):
            if time.monotonic() > deadline:
                raise FetchTimeoutError(url, opts.fetch_timeout_ms)
            if chunk:
                chunks.append(chunk)
        encoding = mime_type.charset or getattr(resp, "encoding", None) or "utf-8"
        try:
            return b"".join(chunks).decode(encoding, errors="replace")
        except LookupError:
            return b"".join(chunks).decode("utf-8", errors="replace")

    def _classify(self, url: str, opts: FollowOptions) -> VisitResult:
        deadline = time.monotonic() + opts.timeout_seconds
        resp = self.fetcher.get(
            url,
            headers={"User-Agent": opts.user_agent, "Accept": opts.accept},
            allow_redirects=False,
            stream=True,
            timeout=opts.timeout_seconds,
        )
        with resp:
            status = resp.status_code
            headers = CaseInsensitiveDict(resp.headers)

            if status in REDIRECT_STATUSES:
                location = headers.get("Location")
                if not location:
                    error = MalformedRedirectError(url, status)
                    return VisitError(url=url, error=error)
                return HttpRedirectResult(
                    url=url,
                    status=status,
                    headers=headers,
                    redirect_url=urljoin(url, location),
                )

            content_type = headers.get("Content-Type")
            mime_type = MimeType.parse(content_type)
            if status == 200 and mime_type is not None and mime_type.is_text:
                text = self._read_text(resp, mime_type, url, opts, deadline)
                refresh = extract_meta_refresh_url(text)
                if refresh:
                    return ContentRedirectResult(
                        url=url,
                        status=status,
                        headers=headers,
                        redirect_url=urljoin(url, refresh),
                        content_text=text,
                    )
                return TerminalTextContentResult(
                    url=url,
                    status=status,
                    headers=headers,
                    content_type=content_type,
                    mime_type=mime_type,
                    content_text=text,
                )

            return TerminalResult(
                url=url,
                status=status,
                headers=headers,
                content_type=content_type,
                mime_type=mime_type,
            )
