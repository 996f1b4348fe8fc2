"""Outcome of a single HTTP interaction while following a link."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Optional

from requests.structures import CaseInsensitiveDict

if TYPE_CHECKING:
    from uniform_resource.core.scraping.detector import MimeType


class VisitKind(str, Enum):
    ERROR = "error"
    HTTP_REDIRECT = "http_redirect"
    CONTENT_REDIRECT = "content_redirect"
    TERMINAL = "terminal"
    TERMINAL_TEXT = "terminal_text"


@dataclass(frozen=True, kw_only=True)
class VisitResult:
    kind: ClassVar[VisitKind]
    url: str


@dataclass(frozen=True, kw_only=True)
class VisitError(VisitResult):
    kind: ClassVar[VisitKind] = VisitKind.ERROR
    error: BaseException


@dataclass(frozen=True, kw_only=True)
class HttpRedirectResult(VisitResult):
    kind: ClassVar[VisitKind] = VisitKind.HTTP_REDIRECT
    status: int
    redirect_url: str
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)


@dataclass(frozen=True, kw_only=True)
class ContentRedirectResult(VisitResult):
    """HTTP 200 text response carrying a zero-delay meta refresh."""

    kind: ClassVar[VisitKind] = VisitKind.CONTENT_REDIRECT
    status: int
    redirect_url: str
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    content_text: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class TerminalResult(VisitResult):
    kind: ClassVar[VisitKind] = VisitKind.TERMINAL
    status: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    content_type: Optional[str] = None
    mime_type: Optional["MimeType"] = None


@dataclass(frozen=True, kw_only=True)
class TerminalTextContentResult(TerminalResult):
    kind: ClassVar[VisitKind] = VisitKind.TERMINAL_TEXT
    content_text: str
