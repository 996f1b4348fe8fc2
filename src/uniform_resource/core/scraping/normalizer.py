"""URL and label normalizer utilities.

Functions to default URL schemes, remove tracking params and tidy labels.
"""

from __future__ import annotations

import re
from typing import Callable, Optional
from urllib.parse import ParseResult, unquote_plus, urlparse, urlunparse

TRACKING_PARAM_PREFIX = "utm_"

_LINE_BREAKS = re.compile(r"\r\n|\n|\r")
_EXPLICIT_SCHEME = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)


def is_tracking_param(name: str) -> bool:
    return name.lower().startswith(TRACKING_PARAM_PREFIX)


def prefix_with_http(url: str) -> str:
    """Default scheme-less URLs to ``http://``."""
    if _EXPLICIT_SCHEME.match(url):
        return url
    if url.startswith("//"):
        return "http:" + url
    return "http://" + url


def strip_query_params(url: str, should_remove: Callable[[str], bool]) -> str:
    """Return `url` without the query arguments selected by `should_remove`.

    Kept arguments stay byte for byte as they were. The URL is returned
    untouched when nothing is removed, so callers can compare before/after
    to detect a change.
    """
    p: ParseResult = urlparse(url)
    if not p.query:
        return url
    segments = p.query.split("&")
    kept = [
        s for s in segments if not should_remove(unquote_plus(s.partition("=")[0]))
    ]
    if len(kept) == len(segments):
        return url
    return urlunparse(p._replace(query="&".join(kept)))


def remove_tracking_codes(url: str) -> str:
    """Strip every ``utm_*`` query argument. Idempotent."""
    return strip_query_params(url, is_tracking_param)


def clean_label(label: Optional[str]) -> Optional[str]:
    """Collapse line breaks into single spaces and trim."""
    if label is None:
        return None
    return _LINE_BREAKS.sub(" ", label).strip()


def favicon_url(url: str) -> str:
    p = urlparse(prefix_with_http(url))
    if not p.netloc:
        raise ValueError(f"Cannot derive a favicon location from {url!r}")
    return urlunparse((p.scheme, p.netloc, "/favicon.ico", "", "", ""))


def domain_brand(url: str) -> str:
    host = (urlparse(url).hostname or "").lower()
    return re.sub(r"^www\.", "", host)
