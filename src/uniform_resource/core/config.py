import tempfile
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/42.0.2311.135 Safari/537.36 Edge/12.246"
)


def _default_download_directory() -> Path:
    return Path(tempfile.gettempdir()) / "uniform-resource-downloads"


class FollowOptions(BaseModel):
    """
    Options for a single redirect-chain resolution.

    Every hop is a separate request with transport-level redirects disabled.
    """

    max_redirect_depth: int = Field(default=10, ge=1)
    fetch_timeout_ms: int = Field(default=2500, gt=0)
    user_agent: str = DEFAULT_USER_AGENT
    accept: str = "text/html"

    # When set, utm_* query arguments are removed right before each fetch.
    strip_tracking_codes: bool = False

    @property
    def timeout_seconds(self) -> float:
        return self.fetch_timeout_ms / 1000.0


class DownloadOptions(BaseModel):
    """Where and how downloaded resource bodies are written."""

    destination_directory: Path = Field(default_factory=_default_download_directory)
    create_destination: bool = True
    determine_file_type: bool = True
    chunk_size: int = Field(default=8192, gt=0)

    # Empty list means every terminal content type is downloaded.
    allowed_content_types: List[str] = Field(default_factory=list)

    @field_validator("allowed_content_types")
    def content_types_lowercase(cls, v):
        return [c.strip().lower() for c in v if c and c.strip()]


class LinkResolutionConfig(BaseModel):
    """
    Job contract for the link resolution flow.

    Describes the source document, where its links come from and which
    enrichment steps run for each of them.
    """

    job_name: str
    origin_urn: str
    source_url: str

    # Inline HTML skips fetching `source_url` (e-mail bodies, saved pages).
    html_source: Optional[str] = None

    follow: FollowOptions = Field(default_factory=FollowOptions)
    download: Optional[DownloadOptions] = None
    cache_size: int = Field(default=50, ge=1)

    skip_blank_labels: bool = True
    skip_mailto: bool = True
    enrich_content: bool = True
    extract_readable: bool = False
    resolve_favicons: bool = False
    max_links: Optional[int] = Field(default=None, ge=1)

    @field_validator("job_name")
    def job_name_must_be_slug(cls, v):
        if " " in v:
            raise ValueError("job_name must not contain spaces")
        return v.lower()

    @field_validator("origin_urn")
    def origin_urn_not_blank(cls, v):
        if not v.strip():
            raise ValueError("origin_urn must not be blank")
        return v.strip()
