"""Prefect tasks wrapping the link resolution components.

Each task is a unit of work with logging (and retries where a retry is
safe). The async components are driven with `asyncio.run` inside the task.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from prefect import get_run_logger, task

from uniform_resource.core.config import FollowOptions
from uniform_resource.core.report import summarize_resource, summarize_visit
from uniform_resource.core.scraping.fetcher import Fetcher
from uniform_resource.core.scraping.follower import RedirectFollower
from uniform_resource.suppliers.base import acquire_resource
from uniform_resource.transformers import typical_transformer


@task(name="fetch_html", retries=2, retry_delay_seconds=3)
def fetch_html_task(url: str, options: Optional[FollowOptions] = None) -> str:
    logger = get_run_logger()
    opts = options or FollowOptions()
    logger.info("Fetching URL: %s", url)
    with Fetcher(timeout=opts.timeout_seconds, ua_pool=[opts.user_agent]) as f:
        resp = f.get(url, headers={"Accept": opts.accept})
        resp.raise_for_status()
    logger.info("Fetched %s (status=%s)", url, resp.status_code)
    return resp.text


@task(name="follow_url", retries=0)
def follow_url_task(
    url: str, options: Optional[FollowOptions] = None
) -> List[Dict[str, Any]]:
    logger = get_run_logger()
    follower = RedirectFollower(options=options)
    visits = asyncio.run(follower.follow(url))
    logger.info("Followed %s through %d visits", url, len(visits))
    return [summarize_visit(v) for v in visits]


@task(name="acquire_resource", retries=0)
def acquire_resource_task(
    uri: str,
    label: Optional[str] = None,
    options: Optional[FollowOptions] = None,
    enrich_content: bool = True,
) -> Dict[str, Any]:
    logger = get_run_logger()
    transformer = typical_transformer(
        follower=RedirectFollower(options=options),
        enrich_content=enrich_content,
    )
    resource = asyncio.run(acquire_resource(uri, transformer, label=label))
    logger.info("Acquired %s as %s", uri, resource.kind.value)
    return summarize_resource(resource)
