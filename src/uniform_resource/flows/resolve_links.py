"""
Link resolution flow.

This Prefect flow takes a source document (a web page, or the HTML body of
an e-mail passed inline), and for every link in it:

1. validates the job configuration (`LinkResolutionConfig`);
2. fetches the page when no inline HTML was given;
3. drops links that are not worth following (blank labels, ``mailto:``);
4. runs each link through the transformation pipeline: label cleanup,
   redirect following (memoized in an LRU cache), tracking code removal,
   then the optional enrichment steps (content, readability, favicon,
   download);
5. returns one summary dict per retained resource, in document order.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from prefect import flow, get_run_logger

from uniform_resource.core.cache import LRUCache
from uniform_resource.core.config import LinkResolutionConfig
from uniform_resource.core.interfaces import (
    ResourceFilter,
    Transformer,
    TransformerContext,
)
from uniform_resource.core.report import summarize_resource
from uniform_resource.core.resource import Resource
from uniform_resource.core.scraping.downloader import TypicalDownloader
from uniform_resource.core.scraping.follower import RedirectFollower
from uniform_resource.core.scraping.parser import HtmlAnchor
from uniform_resource.core.scraping.prefect_tasks import fetch_html_task
from uniform_resource.suppliers import (
    BlankLabelFilter,
    BrowserTraversableFilter,
    FilteredResourcesCounter,
    HtmlContentResourcesSupplier,
    chained_filter,
)
from uniform_resource.transformers import (
    DownloadContent,
    DownloadHttpContentTypes,
    EnrichReadableContent,
    FavIconResource,
    FollowRedirectsGranular,
    typical_transformer,
)


def build_transformer(
    config: LinkResolutionConfig,
    follower: Optional[RedirectFollower] = None,
) -> Transformer[TransformerContext, Resource]:
    """Assemble the resource pipeline described by `config`."""
    follower = follower or RedirectFollower(options=config.follow)
    cache = LRUCache(max_entries=config.cache_size)

    extra: List[Transformer[TransformerContext, Resource]] = []
    if config.extract_readable:
        extra.append(EnrichReadableContent())
    if config.resolve_favicons:
        icon_pipe = FollowRedirectsGranular(follower=follower, cache=cache)
        extra.append(FavIconResource(icon_pipe))
    if config.download is not None:
        download = DownloadContent(
            TypicalDownloader(config.download),
            fetcher=follower.fetcher,
            chunk_size=config.download.chunk_size,
        )
        allowed = config.download.allowed_content_types
        if allowed:
            extra.append(DownloadHttpContentTypes(download, *allowed))
        else:
            extra.append(download)

    return typical_transformer(
        follower=follower,
        cache=cache,
        enrich_content=config.enrich_content,
        extra=extra,
    )


def build_filter(
    config: LinkResolutionConfig, counter: FilteredResourcesCounter
) -> Optional[ResourceFilter]:
    filters: List[ResourceFilter] = []
    if config.skip_blank_labels:
        filters.append(BlankLabelFilter(counter.reporter("blank_label")))
    if config.skip_mailto:
        filters.append(BrowserTraversableFilter(counter.reporter("not_traversable")))
    if not filters:
        return None
    return chained_filter(*filters)


def _limit_anchors(max_links: Optional[int]):
    if not max_links:
        return None
    seen: List[HtmlAnchor] = []

    def retain(anchor: HtmlAnchor) -> bool:
        if len(seen) >= max_links:
            return False
        seen.append(anchor)
        return True

    return retain


@flow(name="Resolve Links", log_prints=True)
def resolve_links_flow(config_dict: dict) -> List[Dict[str, Any]]:
    """Resolve and enrich every link of a source document.

    config_dict: must conform to `LinkResolutionConfig`.
    """
    logger = get_run_logger()
    try:
        config = LinkResolutionConfig(**config_dict)
        logger.info("Config valid for job: %s", config.job_name)
    except Exception as e:
        logger.error("Invalid config: %s", e)
        raise

    html = config.html_source
    if html is None:
        html = fetch_html_task(config.source_url, config.follow)

    counter = FilteredResourcesCounter()
    supplier = HtmlContentResourcesSupplier(
        origin_urn=config.origin_urn,
        html_source=html,
        filter=build_filter(config, counter),
        transformer=build_transformer(config),
        base_url=config.source_url,
        anchor_filter=_limit_anchors(config.max_links),
    )

    resources: List[Resource] = []
    ctx = TransformerContext(fetch_timeout_ms=config.follow.fetch_timeout_ms)
    asyncio.run(supplier.for_each_resource(ctx, resources.append))

    for key, removed in counter.removed.items():
        if removed:
            logger.info("Filter %s removed %d links", key, removed)
    logger.info(
        "Job %s completed. %d resources resolved.", config.job_name, len(resources)
    )
    return [summarize_resource(r) for r in resources]


if __name__ == "__main__":
    payload = {
        "job_name": "resolve_newsletter_links",
        "origin_urn": "urn:newsletter:example",
        "source_url": "https://example.com/newsletter.html",
        "follow": {"max_redirect_depth": 10, "fetch_timeout_ms": 2500},
        "download": {"allowed_content_types": ["application/pdf"]},
    }
    print(resolve_links_flow(payload))
