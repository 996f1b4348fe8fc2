"""Base supplier: turn anchors into (optionally transformed) resources."""

from __future__ import annotations

from typing import Optional

from uniform_resource.core.interfaces import (
    ResourceFilter,
    Transformer,
    TransformerContext,
)
from uniform_resource.core.resource import UNKNOWN_PROVENANCE, Provenance, Resource
from uniform_resource.core.scraping.parser import HtmlAnchor


class TypicalResourcesSupplier:
    """Build resources from anchors, filtering before and after transforming.

    The supplier is the provenance of every resource it builds.
    """

    def __init__(
        self,
        origin_urn: str,
        filter: Optional[ResourceFilter] = None,
        transformer: Optional[Transformer[TransformerContext, Resource]] = None,
    ) -> None:
        self.origin_urn = origin_urn
        self.provenance = Provenance(urn=origin_urn)
        self.filter = filter
        self.transformer = transformer

    async def resource_from_anchor(
        self, ctx: TransformerContext, anchor: HtmlAnchor
    ) -> Optional[Resource]:
        original = Resource(
            uri=anchor.href, label=anchor.label, provenance=self.provenance
        )
        if self.filter is not None and not self.filter.retain_original(original):
            return None
        if self.transformer is None:
            return original
        transformed = await self.transformer.transform(ctx, original)
        if self.filter is not None and not self.filter.retain_transformed(transformed):
            return None
        return transformed


async def acquire_resource(
    uri: str,
    transformer: Transformer[TransformerContext, Resource],
    label: Optional[str] = None,
    provenance: Optional[Provenance] = None,
    ctx: Optional[TransformerContext] = None,
) -> Resource:
    """Build a single resource for `uri` and run it through `transformer`."""
    resource = Resource(
        uri=uri,
        label=label,
        provenance=provenance or UNKNOWN_PROVENANCE,
    )
    return await transformer.transform(ctx or TransformerContext(), resource)
