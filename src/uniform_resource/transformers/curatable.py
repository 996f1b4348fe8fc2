from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from uniform_resource.content.curation import (
    BUILD_CURATABLE_CONTENT,
    STANDARDIZE_CURATION_TITLE,
    ContentContext,
)
from uniform_resource.content.models import CuratableContent
from uniform_resource.core.interfaces import Transformer, TransformerContext
from uniform_resource.core.pipeline import transformation_pipe
from uniform_resource.core.resource import Resource, is_followed_resource
from uniform_resource.core.scraping.detector import is_terminal_text_content_result

logger = logging.getLogger(__name__)

TYPICAL_CONTENT_PIPE = transformation_pipe(
    BUILD_CURATABLE_CONTENT, STANDARDIZE_CURATION_TITLE
)


class EnrichCuratableContent(Transformer[TransformerContext, Resource]):
    """Parse the followed page and attach title + social graph.

    `content_pipe` is any content transformer over `CuratableContent`; the
    default builds the content then strips a trailing ``" | Site"`` from the
    title.
    """

    def __init__(
        self,
        content_pipe: Optional[Transformer[ContentContext, CuratableContent]] = None,
    ) -> None:
        self.content_pipe = content_pipe or TYPICAL_CONTENT_PIPE

    async def transform(self, ctx: TransformerContext, resource: Resource) -> Resource:
        if not is_followed_resource(resource):
            return resource
        terminal = resource.terminal_result
        if not is_terminal_text_content_result(terminal):
            return resource

        seed = CuratableContent(
            title=None,
            content_type=terminal.content_type,
            mime_type=terminal.mime_type,
        )
        content = await self.content_pipe.transform(
            ContentContext(uri=resource.uri, html_source=terminal.content_text),
            seed,
        )
        logger.debug("Curated %s: %r", resource.uri, content.title)
        return replace(resource, curatable_content=content)


ENRICH_CURATABLE_CONTENT = EnrichCuratableContent()
