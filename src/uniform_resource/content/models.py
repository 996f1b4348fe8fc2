"""Enrichment values attached to resources with text content."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

if TYPE_CHECKING:
    from uniform_resource.core.scraping.detector import MimeType
    from uniform_resource.core.scraping.parser import PageIcon


@dataclass(frozen=True)
class GovernedContent:
    content_type: Optional[str]
    mime_type: Optional["MimeType"]


@dataclass(frozen=True)
class OpenGraph:
    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    url: Optional[str] = None
    site_name: Optional[str] = None
    locale: Optional[str] = None
    properties: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TwitterCard:
    card: Optional[str] = None
    site: Optional[str] = None
    creator: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    properties: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SocialGraph:
    open_graph: Optional[OpenGraph] = None
    twitter: Optional[TwitterCard] = None


@dataclass(frozen=True)
class CuratableContent:
    """Title and social metadata of a page, built once per text resource."""

    title: Optional[str]
    social_graph: Optional[SocialGraph] = None
    description: Optional[str] = None
    image: Optional[str] = None
    canonical_url: Optional[str] = None
    content_type: Optional[str] = None
    mime_type: Optional["MimeType"] = None
    schemas: Tuple[Dict[str, Any], ...] = ()
    page_icons: Tuple["PageIcon", ...] = ()
    domain_brand: Optional[str] = None


@dataclass(frozen=True)
class ReadableContent:
    """Simplified article produced by a readability collaborator."""

    extractor: str
    text: Optional[str]
    title: Optional[str] = None
    author: Optional[str] = None
    published: Optional[str] = None
    excerpt: Optional[str] = None
    language: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
