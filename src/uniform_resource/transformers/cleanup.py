"""Label and URL tidy-up steps."""

from __future__ import annotations

from uniform_resource.core.interfaces import Transformer, TransformerContext
from uniform_resource.core.resource import Resource, derive_resource
from uniform_resource.core.scraping.normalizer import clean_label, remove_tracking_codes


class RemoveLabelLineBreaksAndTrimSpaces(Transformer[TransformerContext, Resource]):
    async def transform(self, ctx: TransformerContext, resource: Resource) -> Resource:
        if not resource.label:
            return resource
        label = clean_label(resource.label)
        if label == resource.label:
            return resource
        return derive_resource(
            resource,
            "Removed line breaks and trimmed spaces in label",
            label=label,
        )


class RemoveTrackingCodesFromUrl(Transformer[TransformerContext, Resource]):
    async def transform(self, ctx: TransformerContext, resource: Resource) -> Resource:
        cleaned = remove_tracking_codes(resource.uri)
        if cleaned == resource.uri:
            return resource
        return derive_resource(
            resource,
            "Removed utm_* tracking parameters from URL",
            uri=cleaned,
        )


REMOVE_LABEL_LINE_BREAKS = RemoveLabelLineBreaksAndTrimSpaces()
REMOVE_TRACKING_CODES = RemoveTrackingCodesFromUrl()
