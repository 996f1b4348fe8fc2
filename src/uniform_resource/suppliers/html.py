from __future__ import annotations

import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

from uniform_resource.core.interfaces import (
    ResourceFilter,
    Transformer,
    TransformerContext,
)
from uniform_resource.core.resource import Resource
from uniform_resource.core.scraping.parser import AnchorFilter, QueryableHtmlContent

from .base import TypicalResourcesSupplier

logger = logging.getLogger(__name__)

ResourceConsumer = Callable[[Resource], Union[None, Awaitable[None]]]


class HtmlContentResourcesSupplier(TypicalResourcesSupplier):
    """Supply one resource per anchor of an HTML document, in document order.

    Anchors are processed one after another; hosts wanting concurrency run
    several suppliers (or pipelines) side by side.
    """

    def __init__(
        self,
        origin_urn: str,
        html_source: str,
        filter: Optional[ResourceFilter] = None,
        transformer: Optional[Transformer[TransformerContext, Resource]] = None,
        base_url: Optional[str] = None,
        anchor_filter: Optional[AnchorFilter] = None,
    ) -> None:
        super().__init__(origin_urn, filter=filter, transformer=transformer)
        self.content = QueryableHtmlContent(html_source, base_url=base_url)
        self.anchor_filter = anchor_filter

    async def for_each_resource(
        self, ctx: TransformerContext, consume: ResourceConsumer
    ) -> int:
        """Feed every retained resource to `consume`; returns how many."""
        anchors = self.content.anchors(self.anchor_filter)
        logger.info("Supplying %d anchors from %s", len(anchors), self.origin_urn)
        supplied = 0
        for anchor in anchors:
            resource = await self.resource_from_anchor(ctx, anchor)
            if resource is None:
                continue
            outcome = consume(resource)
            if inspect.isawaitable(outcome):
                await outcome
            supplied += 1
        return supplied


class EmailMessageResourcesSupplier(HtmlContentResourcesSupplier):
    """HTML body of an e-mail message."""
