from __future__ import annotations

from dataclasses import replace

from uniform_resource.core.interfaces import Transformer, TransformerContext
from uniform_resource.core.resource import Provenance, Resource
from uniform_resource.core.scraping.normalizer import favicon_url
from uniform_resource.suppliers.base import acquire_resource


class FavIconResource(Transformer[TransformerContext, Resource]):
    """Acquire ``scheme://host/favicon.ico`` through a sub-pipeline.

    `transformer` decides how far the icon goes (follow only, follow and
    download...). The icon's provenance is the resource it belongs to.
    """

    def __init__(self, transformer: Transformer[TransformerContext, Resource]) -> None:
        self.transformer = transformer

    async def transform(self, ctx: TransformerContext, resource: Resource) -> Resource:
        icon = await acquire_resource(
            favicon_url(resource.uri),
            self.transformer,
            provenance=Provenance(urn=resource.uri),
            ctx=ctx,
        )
        return replace(resource, favicon=icon)
