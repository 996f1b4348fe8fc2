"""Resource transformers: pipeline steps from raw link to enriched resource.

`typical_transformer` assembles the usual chain:
label cleanup -> follow redirects -> tracking code removal -> governed
content -> curatable content.
"""

from typing import List, Optional, Tuple

from uniform_resource.core.cache import LRUCache
from uniform_resource.core.interfaces import Transformer, TransformerContext
from uniform_resource.core.pipeline import TransformationPipe, transformation_pipe
from uniform_resource.core.resource import Resource
from uniform_resource.core.scraping.follower import RedirectFollower
from uniform_resource.core.scraping.visits import VisitResult

from .cleanup import (
    REMOVE_LABEL_LINE_BREAKS,
    REMOVE_TRACKING_CODES,
    RemoveLabelLineBreaksAndTrimSpaces,
    RemoveTrackingCodesFromUrl,
)
from .curatable import ENRICH_CURATABLE_CONTENT, EnrichCuratableContent
from .download import DownloadContent, DownloadHttpContentTypes, pdfs_only
from .favicon import FavIconResource
from .follow import FollowRedirectsGranular
from .governed import ENRICH_GOVERNED_CONTENT, EnrichGovernedContent
from .readable import EnrichReadableContent


def typical_transformer(
    follower: Optional[RedirectFollower] = None,
    cache: Optional[LRUCache[str, Tuple[VisitResult, ...]]] = None,
    enrich_content: bool = True,
    extra: Optional[List[Transformer[TransformerContext, Resource]]] = None,
) -> TransformationPipe:
    steps: List[Transformer[TransformerContext, Resource]] = [
        REMOVE_LABEL_LINE_BREAKS,
        FollowRedirectsGranular(follower=follower, cache=cache),
        REMOVE_TRACKING_CODES,
    ]
    if enrich_content:
        steps.extend([ENRICH_GOVERNED_CONTENT, ENRICH_CURATABLE_CONTENT])
    steps.extend(extra or [])
    return transformation_pipe(*steps)


__all__ = [
    "REMOVE_LABEL_LINE_BREAKS",
    "REMOVE_TRACKING_CODES",
    "RemoveLabelLineBreaksAndTrimSpaces",
    "RemoveTrackingCodesFromUrl",
    "ENRICH_CURATABLE_CONTENT",
    "EnrichCuratableContent",
    "DownloadContent",
    "DownloadHttpContentTypes",
    "pdfs_only",
    "FavIconResource",
    "FollowRedirectsGranular",
    "ENRICH_GOVERNED_CONTENT",
    "EnrichGovernedContent",
    "EnrichReadableContent",
    "typical_transformer",
]
