"""Resource suppliers and retention filters."""

from .base import TypicalResourcesSupplier, acquire_resource
from .filters import (
    BlankLabelFilter,
    BrowserTraversableFilter,
    ChainedFilter,
    FilteredResourcesCounter,
    chained_filter,
)
from .html import EmailMessageResourcesSupplier, HtmlContentResourcesSupplier

__all__ = [
    "TypicalResourcesSupplier",
    "acquire_resource",
    "BlankLabelFilter",
    "BrowserTraversableFilter",
    "ChainedFilter",
    "FilteredResourcesCounter",
    "chained_filter",
    "EmailMessageResourcesSupplier",
    "HtmlContentResourcesSupplier",
]
