"""Uniform resource value model.

Resources are immutable. A step that changes a resource creates a new value
pointing back at its predecessor through `transformed_from`; walking that
chain reconstructs the full transformation history. Enrichment data
(governed content, curatable content, downloads...) is attached with
`dataclasses.replace` and does not count as a transformation.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Iterator, List, Optional, Tuple
from urllib.parse import urlparse

if TYPE_CHECKING:
    from uniform_resource.content.models import (
        CuratableContent,
        GovernedContent,
        ReadableContent,
    )
    from uniform_resource.core.scraping.downloader import DownloadResult
    from uniform_resource.core.scraping.visits import VisitResult


class ResourceKind(str, Enum):
    ORIGINAL = "original"
    TRANSFORMED = "transformed"
    FOLLOWED = "followed"
    INVALID = "invalid"


@dataclass(frozen=True)
class Provenance:
    urn: str


UNKNOWN_PROVENANCE = Provenance(urn="unknown")


@dataclass(frozen=True, kw_only=True)
class Resource:
    kind: ClassVar[ResourceKind] = ResourceKind.ORIGINAL

    uri: str
    provenance: Provenance = UNKNOWN_PROVENANCE
    label: Optional[str] = None
    doi: Optional[str] = None

    governed_content: Optional["GovernedContent"] = None
    curatable_content: Optional["CuratableContent"] = None
    readable_content: Optional["ReadableContent"] = None
    download: Optional["DownloadResult"] = None
    favicon: Optional["Resource"] = None


@dataclass(frozen=True, kw_only=True)
class TransformedResource(Resource):
    kind: ClassVar[ResourceKind] = ResourceKind.TRANSFORMED

    transformed_from: Resource
    pipe_position: int
    remarks: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class FollowedResource(TransformedResource):
    """A resource whose redirect chain has been resolved.

    `uri` holds the final URL; `visits` every hop in order.
    """

    kind: ClassVar[ResourceKind] = ResourceKind.FOLLOWED

    visits: Tuple["VisitResult", ...]
    terminal_result: "VisitResult"

    @property
    def is_redirected(self) -> bool:
        return len(self.visits) > 1

    @property
    def origin_uri(self) -> str:
        return self.visits[0].url if self.visits else self.uri

    @property
    def hostname(self) -> Optional[str]:
        return urlparse(self.uri).hostname


@dataclass(frozen=True, kw_only=True)
class InvalidResource(Resource):
    """Terminal failure state; never transformed further."""

    kind: ClassVar[ResourceKind] = ResourceKind.INVALID

    error: BaseException
    remarks: Optional[str] = None
    visits: Tuple["VisitResult", ...] = ()


def resource_fields(resource: Resource) -> dict[str, Any]:
    """The fields every resource shares, ready to build another variant."""
    return {f.name: getattr(resource, f.name) for f in fields(Resource)}


def next_pipe_position(resource: Resource) -> int:
    if isinstance(resource, TransformedResource):
        return resource.pipe_position + 1
    return 0


def derive_resource(
    resource: Resource, remarks: str, **changes: Any
) -> TransformedResource:
    """Create the next transformed state of `resource`.

    A resource that is already transformed keeps its concrete class (a
    followed resource stays followed); an original one becomes a plain
    `TransformedResource`.
    """
    position = next_pipe_position(resource)
    if isinstance(resource, TransformedResource):
        return replace(
            resource,
            transformed_from=resource,
            pipe_position=position,
            remarks=remarks,
            **changes,
        )
    values = resource_fields(resource)
    values.update(changes)
    return TransformedResource(
        transformed_from=resource,
        pipe_position=position,
        remarks=remarks,
        **values,
    )


def invalidate_resource(
    resource: Resource,
    error: BaseException,
    visits: Tuple["VisitResult", ...] = (),
) -> InvalidResource:
    return InvalidResource(
        error=error,
        remarks=str(error),
        visits=tuple(visits),
        **resource_fields(resource),
    )


def transformation_history(resource: Resource) -> Iterator[Resource]:
    """Yield `resource` and its ancestors, newest first."""
    active: Optional[Resource] = resource
    while active is not None:
        yield active
        active = getattr(active, "transformed_from", None)


def all_transformation_remarks(resource: Resource) -> List[str]:
    """Remarks of every transformation, oldest first."""
    result: List[str] = []
    for state in transformation_history(resource):
        if isinstance(state, TransformedResource):
            result.insert(0, state.remarks or "(no remarks)")
    return result


def is_uniform_resource(o: object) -> bool:
    return isinstance(o, Resource)


def is_transformed_resource(o: object) -> bool:
    return isinstance(o, TransformedResource)


def is_followed_resource(o: object) -> bool:
    return isinstance(o, Resource) and o.kind is ResourceKind.FOLLOWED


def is_redirected_resource(o: object) -> bool:
    return is_followed_resource(o) and o.is_redirected


def is_invalid_resource(o: object) -> bool:
    return isinstance(o, Resource) and o.kind is ResourceKind.INVALID


def has_governed_content(o: object) -> bool:
    return isinstance(o, Resource) and o.governed_content is not None


def has_curatable_content(o: object) -> bool:
    return isinstance(o, Resource) and o.curatable_content is not None


def has_readable_content(o: object) -> bool:
    return isinstance(o, Resource) and o.readable_content is not None


def is_download_result(o: object) -> bool:
    return isinstance(o, Resource) and o.download is not None


def has_favicon(o: object) -> bool:
    return isinstance(o, Resource) and o.favicon is not None
