"""Shared fakes: canned HTTP responses served without touching the network."""

from __future__ import annotations

from typing import Dict, List, Optional, Union

import pytest
import requests
from requests.structures import CaseInsensitiveDict


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        headers: Optional[Dict[str, str]] = None,
        text: str = "",
        content: Optional[bytes] = None,
        fail_after: Optional[int] = None,
    ):
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers or {})
        self.text = text
        self.content = content if content is not None else text.encode("utf-8")
        self.fail_after = fail_after
        self.closed = False

    def iter_content(self, chunk_size: int = 8192):
        for n, start in enumerate(range(0, len(self.content), chunk_size)):
            if self.fail_after is not None and n >= self.fail_after:
                raise requests.ConnectionError("connection reset by peer")
            yield self.content[start : start + chunk_size]

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


Route = Union[FakeResponse, Exception]


class FakeFetcher:
    """Stands in for `Fetcher`: serves routes by exact URL, records calls."""

    def __init__(self, routes: Optional[Dict[str, Route]] = None):
        self.routes: Dict[str, Route] = dict(routes or {})
        self.calls: List[Dict] = []

    def _serve(self, url: str, headers, kwargs) -> FakeResponse:
        self.calls.append({"url": url, "headers": headers or {}, **kwargs})
        route = self.routes.get(url)
        if route is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(route, Exception):
            raise route
        return route

    def get(self, url: str, headers=None, **kwargs) -> FakeResponse:
        return self._serve(url, headers, kwargs)

    def stream_get(self, url: str, headers=None, **kwargs) -> FakeResponse:
        return self._serve(url, headers, {"stream": True, **kwargs})

    @property
    def urls(self) -> List[str]:
        return [c["url"] for c in self.calls]


def html_page(status: int = 200, body: str = "<html></html>", **headers) -> FakeResponse:
    h = {"Content-Type": "text/html; charset=utf-8"}
    h.update({k.replace("_", "-"): v for k, v in headers.items()})
    return FakeResponse(status, h, text=body)


def redirect(location: Optional[str], status: int = 301) -> FakeResponse:
    headers = {"Location": location} if location is not None else {}
    return FakeResponse(status, headers)


def meta_refresh(target: str) -> FakeResponse:
    body = (
        "<html><head><noscript>"
        f'<META http-equiv="refresh" content="0;URL={target}">'
        "</noscript></head></html>"
    )
    return html_page(body=body)


SHORT_LINK = "https://t.co/ELrZmo81wI"
ARTICLE_URL = (
    "https://www.foxnews.com/lifestyle/"
    "photo-of-donald-trump-look-alike-in-spain-goes-viral"
)
ARTICLE_TITLE = "Photo of Donald Trump 'look-alike' in Spain goes viral"

ARTICLE_HTML = f"""<!DOCTYPE html>
<html lang="en">
<head>
  <title>{ARTICLE_TITLE} | Fox News</title>
  <link rel="icon" href="/static/favicon.ico">
  <link rel="canonical" href="{ARTICLE_URL}">
  <meta name="description" content="A man in Spain looks a lot like the president.">
  <meta property="og:type" content="website">
  <meta property="og:type" content="article">
  <meta property="og:title" content="{ARTICLE_TITLE}">
  <meta property="og:site_name" content="Fox News">
  <meta name="twitter:card" content="summary_large_image">
  <meta name="twitter:title" content="Trump look-alike | Fox News">
  <script type="application/ld+json">
    {{"@context": "https://schema.org", "@graph": [
      {{"@type": "NewsArticle", "headline": "{ARTICLE_TITLE}"}},
      {{"@type": "Organization", "name": "Fox News"}}
    ]}}
  </script>
</head>
<body>
  <nav>Home | Lifestyle</nav>
  <article><h1>{ARTICLE_TITLE}</h1><p>A photo went viral this week.</p></article>
</body>
</html>
"""


def short_link_routes() -> Dict[str, Route]:
    """t.co -> meta refresh -> three HTTP redirects -> article (5 visits)."""
    return {
        SHORT_LINK: meta_refresh("https://fxn.ws/2Q3wI0P"),
        "https://fxn.ws/2Q3wI0P": redirect("https://bit.ly/fox-look-alike", 301),
        "https://bit.ly/fox-look-alike": redirect(
            "https://www.foxnews.com/lifestyle/"
            "photo-of-donald-trump-look-alike-in-spain-goes-viral?utm_source=twitter",
            302,
        ),
        "https://www.foxnews.com/lifestyle/"
        "photo-of-donald-trump-look-alike-in-spain-goes-viral?utm_source=twitter": redirect(
            ARTICLE_URL, 307
        ),
        ARTICLE_URL: html_page(body=ARTICLE_HTML),
    }


@pytest.fixture
def short_link_fetcher() -> FakeFetcher:
    return FakeFetcher(short_link_routes())
