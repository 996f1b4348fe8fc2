"""Content enrichment: governed/curatable/readable content of text pages."""

from .curation import (
    BUILD_CURATABLE_CONTENT,
    STANDARDIZE_CURATION_TITLE,
    BuildCuratableContent,
    ContentContext,
    StandardizeCurationTitle,
    resolve_title,
    strip_site_name,
)
from .models import (
    CuratableContent,
    GovernedContent,
    OpenGraph,
    ReadableContent,
    SocialGraph,
    TwitterCard,
)
from .readability import SoupReadableExtractor, TrafilaturaExtractor

__all__ = [
    "BUILD_CURATABLE_CONTENT",
    "STANDARDIZE_CURATION_TITLE",
    "BuildCuratableContent",
    "ContentContext",
    "StandardizeCurationTitle",
    "resolve_title",
    "strip_site_name",
    "CuratableContent",
    "GovernedContent",
    "OpenGraph",
    "ReadableContent",
    "SocialGraph",
    "TwitterCard",
    "SoupReadableExtractor",
    "TrafilaturaExtractor",
]
