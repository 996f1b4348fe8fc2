from __future__ import annotations

from dataclasses import replace

from uniform_resource.content.models import GovernedContent
from uniform_resource.core.interfaces import Transformer, TransformerContext
from uniform_resource.core.resource import Resource, is_followed_resource
from uniform_resource.core.scraping.detector import is_terminal_text_content_result


class EnrichGovernedContent(Transformer[TransformerContext, Resource]):
    """Attach content type and MIME type of a followed text resource."""

    async def transform(self, ctx: TransformerContext, resource: Resource) -> Resource:
        if not is_followed_resource(resource):
            return resource
        terminal = resource.terminal_result
        if not is_terminal_text_content_result(terminal):
            return resource
        return replace(
            resource,
            governed_content=GovernedContent(
                content_type=terminal.content_type,
                mime_type=terminal.mime_type,
            ),
        )


ENRICH_GOVERNED_CONTENT = EnrichGovernedContent()
