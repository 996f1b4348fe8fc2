"""Readability collaborators: reduce a page to its article text.

`TrafilaturaExtractor` is the default; `SoupReadableExtractor` is a light
BeautifulSoup fallback with no extra dependency beyond bs4.
"""

from __future__ import annotations

import json
from typing import Optional

import trafilatura
from bs4 import BeautifulSoup

from uniform_resource.content.models import ReadableContent
from uniform_resource.core.interfaces import ReadableExtractor

_NOISE_TAGS = [
    "script",
    "style",
    "noscript",
    "nav",
    "header",
    "footer",
    "aside",
    "form",
]


class TrafilaturaExtractor(ReadableExtractor):
    name = "trafilatura"

    def __init__(self, include_comments: bool = False, include_tables: bool = True):
        self.include_comments = include_comments
        self.include_tables = include_tables

    def extract(self, html: str, url: str) -> ReadableContent:
        raw = trafilatura.extract(
            html,
            url=url,
            output_format="json",
            with_metadata=True,
            include_comments=self.include_comments,
            include_tables=self.include_tables,
        )
        data = json.loads(raw) if raw else {}
        return ReadableContent(
            extractor=self.name,
            text=data.get("text") or data.get("raw_text"),
            title=data.get("title"),
            author=data.get("author"),
            published=data.get("date"),
            excerpt=data.get("excerpt") or data.get("description"),
            language=data.get("language"),
            metadata=data,
        )


class SoupReadableExtractor(ReadableExtractor):
    """Article text from ``<article>``/``<main>``/``<body>`` minus page chrome."""

    name = "soup"

    def extract(self, html: str, url: str) -> ReadableContent:
        soup = BeautifulSoup(html or "", "html.parser")
        title_tag = soup.find("title")
        title = title_tag.get_text().strip() if title_tag else None
        lang = soup.html.get("lang") if soup.html else None
        for tag in soup.find_all(_NOISE_TAGS):
            tag.decompose()
        root = soup.find("article") or soup.find("main") or soup.body or soup
        lines = [ln.strip() for ln in root.get_text("\n").splitlines()]
        lines = [ln for ln in lines if ln]
        text = "\n".join(lines) or None
        excerpt: Optional[str] = lines[0] if lines else None
        return ReadableContent(
            extractor=self.name,
            text=text,
            title=title or None,
            excerpt=excerpt,
            language=lang,
            metadata={"url": url},
        )
