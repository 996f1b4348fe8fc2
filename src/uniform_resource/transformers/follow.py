"""Follow a resource's redirect chain and record every hop."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from uniform_resource.core.cache import LRUCache
from uniform_resource.core.errors import RedirectDepthExceededError
from uniform_resource.core.interfaces import Transformer, TransformerContext
from uniform_resource.core.resource import (
    FollowedResource,
    Resource,
    invalidate_resource,
    next_pipe_position,
    resource_fields,
)
from uniform_resource.core.scraping.detector import (
    is_terminal_result,
    is_visit_error,
)
from uniform_resource.core.scraping.follower import RedirectFollower
from uniform_resource.core.scraping.visits import VisitResult

logger = logging.getLogger(__name__)


class FollowRedirectsGranular(Transformer[TransformerContext, Resource]):
    """Resolve `resource.uri` into a `FollowedResource` or `InvalidResource`.

    The optional `cache` memoizes resolved visit lists per origin URL; a hit
    skips the network entirely. Chains ending in a `VisitError` are not
    cached. `ctx.fetch_timeout_ms` overrides the follower timeout.
    """

    def __init__(
        self,
        follower: Optional[RedirectFollower] = None,
        cache: Optional[LRUCache[str, Tuple[VisitResult, ...]]] = None,
    ) -> None:
        self.follower = follower or RedirectFollower()
        self.cache = cache

    async def _visits(
        self, ctx: TransformerContext, uri: str
    ) -> Tuple[VisitResult, ...]:
        if self.cache is not None:
            cached = self.cache.get(uri)
            if cached is not None:
                logger.debug("Redirect cache hit for %s", uri)
                return cached

        options = self.follower.options
        if ctx is not None and ctx.fetch_timeout_ms:
            options = options.model_copy(
                update={"fetch_timeout_ms": ctx.fetch_timeout_ms}
            )
        visits = tuple(await self.follower.follow(uri, options))
        if self.cache is not None and is_terminal_result(visits[-1]):
            self.cache.put(uri, visits)
        return visits

    async def transform(self, ctx: TransformerContext, resource: Resource) -> Resource:
        try:
            visits = await self._visits(ctx, resource.uri)
        except RedirectDepthExceededError as exc:
            logger.warning("Invalid resource %s: %s", resource.uri, exc)
            return invalidate_resource(resource, exc, exc.visits)

        last = visits[-1]
        if is_visit_error(last):
            return invalidate_resource(resource, last.error, visits)

        values = resource_fields(resource)
        values["uri"] = last.url
        return FollowedResource(
            transformed_from=resource,
            pipe_position=next_pipe_position(resource),
            remarks=f"Followed, with {len(visits)} results",
            visits=visits,
            terminal_result=last,
            **values,
        )
