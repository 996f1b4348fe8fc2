"""HTTP fetcher with retries, timeout and configurable User-Agent.

Provides a small `Fetcher` object exposing `get` and `stream_get`. Redirect
following is left to the caller: link resolution needs every hop.
"""

from __future__ import annotations

import random
from typing import Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from uniform_resource.core.config import DEFAULT_USER_AGENT


class Fetcher:
    """Small HTTP client with sensible defaults for link resolution.

    Usage:
        f = Fetcher(timeout=2.5)
        resp = f.get(url, allow_redirects=False)

    `retries` defaults to 0 so one call is one outbound request.
    """

    def __init__(
        self,
        timeout: float = 15,
        retries: int = 0,
        backoff_factor: float = 0.3,
        ua_pool: Optional[list[str]] = None,
    ) -> None:
        self.timeout = timeout
        self.session = requests.Session()
        retry = Retry(
            total=retries,
            redirect=0,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset(["GET", "HEAD"]),
            backoff_factor=backoff_factor,
            raise_on_redirect=False,
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self.ua_pool = ua_pool or [DEFAULT_USER_AGENT]

    def _headers(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        base = {"User-Agent": random.choice(self.ua_pool)}
        if headers:
            base.update(headers)
        return base

    def get(self, url: str, headers: Optional[Dict[str, str]] = None, **kwargs):
        kwargs.setdefault("timeout", self.timeout)
        return self.session.get(url, headers=self._headers(headers), **kwargs)

    def stream_get(self, url: str, headers: Optional[Dict[str, str]] = None, **kwargs):
        # Streamed GET for downloading large files
        kwargs.setdefault("timeout", self.timeout)
        return self.session.get(
            url,
            headers=self._headers(headers),
            stream=True,
            **kwargs,
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
