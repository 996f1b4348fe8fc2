"""Retention filters applied by suppliers before and after transformation."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from uniform_resource.core.interfaces import ResourceFilter
from uniform_resource.core.resource import Resource

logger = logging.getLogger(__name__)

FilterReporter = Callable[[Resource], None]


class ChainedFilter(ResourceFilter):
    """Logical AND of filters; evaluation stops at the first rejection."""

    def __init__(self, *chain: ResourceFilter) -> None:
        self.chain = chain

    def retain_original(self, resource: Resource) -> bool:
        return all(f.retain_original(resource) for f in self.chain)

    def retain_transformed(self, resource: Resource) -> bool:
        return all(f.retain_transformed(resource) for f in self.chain)


def chained_filter(*chain: ResourceFilter) -> ChainedFilter:
    return ChainedFilter(*chain)


class _ReportingFilter(ResourceFilter):
    def __init__(self, reporter: Optional[FilterReporter] = None) -> None:
        self.reporter = reporter

    def _reject(self, resource: Resource) -> bool:
        logger.debug("%s rejected %s", type(self).__name__, resource.uri)
        if self.reporter is not None:
            self.reporter(resource)
        return False


class BlankLabelFilter(_ReportingFilter):
    """Drop anchors without text (tracking pixels, image-only links)."""

    def retain_original(self, resource: Resource) -> bool:
        if resource.label is None or len(resource.label) == 0:
            return self._reject(resource)
        return True


class BrowserTraversableFilter(_ReportingFilter):
    """Drop links a browser cannot navigate to (``mailto:``)."""

    def retain_original(self, resource: Resource) -> bool:
        if resource.uri.lower().startswith("mailto:"):
            return self._reject(resource)
        return True


class FilteredResourcesCounter:
    """Count removals per named reporter.

    Usage:
        counter = FilteredResourcesCounter()
        BlankLabelFilter(counter.reporter("Blank label"))
        ...
        counter.count("Blank label")
    """

    def __init__(self) -> None:
        self.removed: Dict[str, int] = {}

    def count(self, key: str) -> int:
        return self.removed.get(key, 0)

    def reporter(self, key: str) -> FilterReporter:
        self.removed[key] = 0

        def report(resource: Resource) -> None:
            self.removed[key] += 1

        return report
