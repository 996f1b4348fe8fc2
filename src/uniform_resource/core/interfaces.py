from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Generic, Iterable, Optional, TypeVar

if TYPE_CHECKING:
    from uniform_resource.content.models import ReadableContent
    from uniform_resource.core.resource import (
        FollowedResource,
        Resource,
    )
    from uniform_resource.core.scraping.downloader import DownloadResult

C = TypeVar("C")
T = TypeVar("T")


@dataclass(frozen=True)
class TransformerContext:
    """Context threaded unchanged through every step of a pipeline."""

    fetch_timeout_ms: Optional[int] = None


class Transformer(ABC, Generic[C, T]):
    """
    Contract every pipeline step follows: take an item, return an item.

    A step that does not apply returns its input unchanged.
    """

    @abstractmethod
    async def transform(self, ctx: C, item: T) -> T:
        raise NotImplementedError()


class ResourceFilter:
    """Decide whether a resource is kept before and after transformation.

    Both hooks retain everything by default so filters only override the
    stage they care about.
    """

    def retain_original(self, resource: "Resource") -> bool:
        return True

    def retain_transformed(self, resource: "Resource") -> bool:
        return True


class ReadableExtractor(ABC):
    """Readability collaborator: turn page HTML into a simplified article."""

    name: str = "readable"

    @abstractmethod
    def extract(self, html: str, url: str) -> "ReadableContent":
        raise NotImplementedError()


class Downloader(ABC):
    """Write a followed resource body to disk and describe the result."""

    @abstractmethod
    def write(self, resource: "FollowedResource", chunks: Iterable[bytes]) -> Path:
        """Consume `chunks` into a new file and return its path."""
        raise NotImplementedError()

    @abstractmethod
    def finalize(
        self, resource: "FollowedResource", dest_path: Path
    ) -> "DownloadResult":
        raise NotImplementedError()


__all__ = [
    "TransformerContext",
    "Transformer",
    "ResourceFilter",
    "ReadableExtractor",
    "Downloader",
]
