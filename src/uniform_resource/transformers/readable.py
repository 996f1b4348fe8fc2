from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Optional

from uniform_resource.content.readability import TrafilaturaExtractor
from uniform_resource.core.interfaces import (
    ReadableExtractor,
    Transformer,
    TransformerContext,
)
from uniform_resource.core.resource import Resource, is_followed_resource
from uniform_resource.core.scraping.detector import is_terminal_text_content_result


class EnrichReadableContent(Transformer[TransformerContext, Resource]):
    """Run a readability collaborator over the followed page.

    Extraction errors are not caught: they fail the pipeline for this
    resource.
    """

    def __init__(self, extractor: Optional[ReadableExtractor] = None) -> None:
        self.extractor = extractor or TrafilaturaExtractor()

    async def transform(self, ctx: TransformerContext, resource: Resource) -> Resource:
        if not is_followed_resource(resource):
            return resource
        terminal = resource.terminal_result
        if not is_terminal_text_content_result(terminal):
            return resource
        readable = await asyncio.to_thread(
            self.extractor.extract, terminal.content_text, resource.uri
        )
        return replace(resource, readable_content=readable)
