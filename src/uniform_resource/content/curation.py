"""Build curatable content (title + social graph) from page HTML.

The steps here are content transformers: they run in a `TransformationPipe`
over a `CuratableContent` value, with a `ContentContext` holding the page.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Dict, Optional

from uniform_resource.content.models import (
    CuratableContent,
    OpenGraph,
    SocialGraph,
    TwitterCard,
)
from uniform_resource.core.interfaces import Transformer
from uniform_resource.core.scraping.normalizer import domain_brand
from uniform_resource.core.scraping.parser import QueryableHtmlContent

TRAILING_SITE_NAME = re.compile(r"^(?P<title>.+?)\s+\|\s+[^|]+$", re.DOTALL)


class ContentContext:
    """The page a content pipeline works on, parsed at most once."""

    def __init__(self, uri: str, html_source: str) -> None:
        self.uri = uri
        self.html_source = html_source
        self._document: Optional[QueryableHtmlContent] = None

    @property
    def document(self) -> QueryableHtmlContent:
        if self._document is None:
            self._document = QueryableHtmlContent(self.html_source, base_url=self.uri)
        return self._document


def _prefixed(meta: Dict[str, str], prefix: str) -> Dict[str, str]:
    return {k[len(prefix):]: v for k, v in meta.items() if k.startswith(prefix)}


def open_graph_from_meta(meta: Dict[str, str]) -> Optional[OpenGraph]:
    props = _prefixed(meta, "og:")
    if not props:
        return None
    return OpenGraph(
        type=props.get("type"),
        title=props.get("title"),
        description=props.get("description"),
        image=props.get("image") or props.get("image:url"),
        url=props.get("url"),
        site_name=props.get("site_name"),
        locale=props.get("locale"),
        properties=props,
    )


def twitter_card_from_meta(meta: Dict[str, str]) -> Optional[TwitterCard]:
    props = _prefixed(meta, "twitter:")
    if not props:
        return None
    return TwitterCard(
        card=props.get("card"),
        site=props.get("site"),
        creator=props.get("creator"),
        title=props.get("title"),
        description=props.get("description"),
        image=props.get("image") or props.get("image:src"),
        properties=props,
    )


def social_graph_from_meta(meta: Dict[str, str]) -> Optional[SocialGraph]:
    og = open_graph_from_meta(meta)
    twitter = twitter_card_from_meta(meta)
    if og is None and twitter is None:
        return None
    return SocialGraph(open_graph=og, twitter=twitter)


def resolve_title(
    social_graph: Optional[SocialGraph], page_title: Optional[str]
) -> Optional[str]:
    """Open Graph title, then Twitter Card title, then the page ``<title>``."""
    if social_graph is not None:
        if social_graph.open_graph is not None and social_graph.open_graph.title:
            return social_graph.open_graph.title.strip()
        if social_graph.twitter is not None and social_graph.twitter.title:
            return social_graph.twitter.title.strip()
    return page_title


def strip_site_name(title: Optional[str]) -> Optional[str]:
    """``"Headline | Site"`` becomes ``"Headline"``; other titles are kept."""
    if not title:
        return title
    match = TRAILING_SITE_NAME.match(title.strip())
    if not match:
        return title
    return match.group("title").strip()


class BuildCuratableContent(Transformer[ContentContext, CuratableContent]):
    async def transform(
        self, ctx: ContentContext, item: CuratableContent
    ) -> CuratableContent:
        doc = ctx.document
        meta = doc.meta()
        sg = social_graph_from_meta(meta)
        og = sg.open_graph if sg else None
        tw = sg.twitter if sg else None
        return replace(
            item,
            title=resolve_title(sg, doc.title()),
            social_graph=sg,
            description=(og and og.description)
            or (tw and tw.description)
            or meta.get("description"),
            image=(og and og.image) or (tw and tw.image),
            canonical_url=doc.canonical_url() or (og and og.url) or None,
            schemas=tuple(doc.untyped_schemas(unwrap_graph=True)),
            page_icons=tuple(doc.page_icons()),
            domain_brand=domain_brand(ctx.uri),
        )


class StandardizeCurationTitle(Transformer[ContentContext, CuratableContent]):
    async def transform(
        self, ctx: ContentContext, item: CuratableContent
    ) -> CuratableContent:
        title = strip_site_name(item.title)
        if title == item.title:
            return item
        return replace(item, title=title)


BUILD_CURATABLE_CONTENT = BuildCuratableContent()
STANDARDIZE_CURATION_TITLE = StandardizeCurationTitle()
