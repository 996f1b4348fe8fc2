"""Classify responses by their Content-Type header.

Provides a small `MimeType` value, a `ContentClass` enum and the predicates
the enrichment steps use to decide whether a visit produced parseable text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from uniform_resource.core.scraping.visits import VisitKind, VisitResult


class ContentClass(str, Enum):
    TEXT = "text"
    BINARY = "binary"


@dataclass(frozen=True)
class MimeType:
    type: str
    subtype: str
    parameters: Dict[str, str] = field(default_factory=dict)

    @property
    def essence(self) -> str:
        return f"{self.type}/{self.subtype}"

    @property
    def is_text(self) -> bool:
        return self.type == "text"

    @property
    def charset(self) -> Optional[str]:
        return self.parameters.get("charset")

    @classmethod
    def parse(cls, content_type: Optional[str]) -> Optional["MimeType"]:
        """Parse a Content-Type header value, `None` when absent or malformed.

        Type, subtype and parameter names are lower-cased; parameter values
        keep their case with surrounding quotes removed.
        """
        if not content_type:
            return None
        essence, _, rest = content_type.partition(";")
        major, sep, minor = essence.strip().partition("/")
        major, minor = major.strip().lower(), minor.strip().lower()
        if not sep or not major or not minor:
            return None
        params: Dict[str, str] = {}
        for part in rest.split(";"):
            name, eq, value = part.partition("=")
            name = name.strip().lower()
            if not eq or not name:
                continue
            params[name] = value.strip().strip('"')
        return cls(type=major, subtype=minor, parameters=params)

    def __str__(self) -> str:
        return self.essence


def classify_content_type(content_type: Optional[str]) -> ContentClass:
    mime = MimeType.parse(content_type)
    if mime is not None and mime.is_text:
        return ContentClass.TEXT
    return ContentClass.BINARY


def is_text_content_type(content_type: Optional[str]) -> bool:
    return classify_content_type(content_type) is ContentClass.TEXT


def content_type_matches(content_type: Optional[str], allowed: str) -> bool:
    """Match either the raw header value or its MIME essence."""
    if not content_type:
        return False
    allowed = allowed.strip().lower()
    if content_type.strip().lower() == allowed:
        return True
    mime = MimeType.parse(content_type)
    return mime is not None and mime.essence == allowed


def is_terminal_result(visit: Optional[VisitResult]) -> bool:
    return visit is not None and visit.kind in (
        VisitKind.TERMINAL,
        VisitKind.TERMINAL_TEXT,
    )


def is_terminal_text_content_result(visit: Optional[VisitResult]) -> bool:
    return (
        visit is not None
        and visit.kind is VisitKind.TERMINAL_TEXT
        and getattr(visit, "content_text", None) is not None
    )


def is_redirect_result(visit: Optional[VisitResult]) -> bool:
    return visit is not None and visit.kind in (
        VisitKind.HTTP_REDIRECT,
        VisitKind.CONTENT_REDIRECT,
    )


def is_visit_error(visit: Optional[VisitResult]) -> bool:
    return visit is not None and visit.kind is VisitKind.ERROR
