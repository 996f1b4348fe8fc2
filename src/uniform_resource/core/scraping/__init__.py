"""Core scraping primitives exported for reuse across transformers and flows.

This package contains small building blocks: Fetcher, RedirectFollower,
detector (content classifier), sniffer, Parser, Normalizer and Downloader.
Prefect task wrappers live in `prefect_tasks` and are imported explicitly.
"""

from .detector import (
    ContentClass,
    MimeType,
    classify_content_type,
    is_redirect_result,
    is_terminal_result,
    is_terminal_text_content_result,
    is_visit_error,
)
from .downloader import (
    DownloadErrorResult,
    DownloadFileResult,
    DownloadIndeterminateFileResult,
    DownloadOutcome,
    DownloadResult,
    DownloadSkipResult,
    DownloadSuccessResult,
    TypicalDownloader,
)
from .fetcher import Fetcher
from .follower import RedirectFollower, extract_meta_refresh_url
from .normalizer import prefix_with_http, remove_tracking_codes
from .parser import HtmlAnchor, QueryableHtmlContent
from .sniffer import FileType, detect
from .visits import (
    ContentRedirectResult,
    HttpRedirectResult,
    TerminalResult,
    TerminalTextContentResult,
    VisitError,
    VisitKind,
    VisitResult,
)

__all__ = [
    "ContentClass",
    "MimeType",
    "classify_content_type",
    "is_redirect_result",
    "is_terminal_result",
    "is_terminal_text_content_result",
    "is_visit_error",
    "DownloadErrorResult",
    "DownloadFileResult",
    "DownloadIndeterminateFileResult",
    "DownloadOutcome",
    "DownloadResult",
    "DownloadSkipResult",
    "DownloadSuccessResult",
    "TypicalDownloader",
    "Fetcher",
    "RedirectFollower",
    "extract_meta_refresh_url",
    "prefix_with_http",
    "remove_tracking_codes",
    "HtmlAnchor",
    "QueryableHtmlContent",
    "FileType",
    "detect",
    "ContentRedirectResult",
    "HttpRedirectResult",
    "TerminalResult",
    "TerminalTextContentResult",
    "VisitError",
    "VisitKind",
    "VisitResult",
]
