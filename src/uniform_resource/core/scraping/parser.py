"""HTML parsing helpers: anchors, meta tags, JSON-LD schemas and icons.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HtmlAnchor:
    href: str
    label: Optional[str] = None


@dataclass(frozen=True)
class PageIcon:
    href: str
    rel: str
    sizes: Optional[str] = None
    type: Optional[str] = None


AnchorFilter = Callable[[HtmlAnchor], bool]
SchemaFilter = Callable[[Dict[str, Any]], bool]


class QueryableHtmlContent:
    """Parsed HTML document that can be queried for links and metadata.

    - `anchors()` returns every ``<a href>`` in document order.
    - `meta()` maps meta names/properties to content (last tag wins).
    - `untyped_schemas()` returns the JSON-LD objects found in the page.
    - `page_icons()` returns the ``<link rel="...icon...">`` entries.
    """

    def __init__(self, html_source: str, base_url: Optional[str] = None) -> None:
        self.html_source = html_source
        self.base_url = base_url
        self.soup = BeautifulSoup(html_source or "", "html.parser")

    def _absolute(self, href: str) -> str:
        return urljoin(self.base_url, href) if self.base_url else href

    def anchors(self, retain: Optional[AnchorFilter] = None) -> List[HtmlAnchor]:
        results: List[HtmlAnchor] = []
        for a in self.soup.find_all("a", href=True):
            raw = str(a.get("href") or "").strip()
            if not raw:
                continue
            anchor = HtmlAnchor(href=self._absolute(raw), label=a.get_text())
            if retain is None or retain(anchor):
                results.append(anchor)
        return results

    def meta(self) -> Dict[str, str]:
        result: Dict[str, str] = {}
        for tag in self.soup.find_all("meta"):
            key = tag.get("property") or tag.get("name") or tag.get("itemprop")
            content = tag.get("content")
            if not key or content is None:
                continue
            result[str(key).strip().lower()] = str(content)
        return result

    def title(self) -> Optional[str]:
        tag = self.soup.find("title")
        if tag is None:
            return None
        text = tag.get_text().strip()
        return text or None

    def canonical_url(self) -> Optional[str]:
        for link in self.soup.find_all("link", href=True):
            if "canonical" in _rel_values(link):
                return self._absolute(str(link["href"]).strip())
        return None

    def untyped_schemas(
        self, unwrap_graph: bool = True, retain: Optional[SchemaFilter] = None
    ) -> List[Dict[str, Any]]:
        """Return the JSON-LD objects of the page.

        Scripts that fail to parse are skipped. With `unwrap_graph` the
        members of an ``@graph`` array are returned instead of the wrapper.
        """
        found: List[Dict[str, Any]] = []
        for script in self.soup.find_all("script", type="application/ld+json"):
            raw = script.string or script.get_text()
            if not raw or not raw.strip():
                continue
            try:
                data = json.loads(raw)
            except ValueError as exc:
                logger.debug("Skipping unparseable JSON-LD block: %s", exc)
                continue
            items = data if isinstance(data, list) else [data]
            for item in items:
                if not isinstance(item, dict):
                    continue
                if unwrap_graph and isinstance(item.get("@graph"), list):
                    found.extend(g for g in item["@graph"] if isinstance(g, dict))
                else:
                    found.append(item)
        if retain is not None:
            found = [s for s in found if retain(s)]
        return found

    def page_icons(self) -> List[PageIcon]:
        icons: List[PageIcon] = []
        for link in self.soup.find_all("link", href=True):
            rels = _rel_values(link)
            if not any("icon" in r for r in rels):
                continue
            icons.append(
                PageIcon(
                    href=self._absolute(str(link["href"]).strip()),
                    rel=" ".join(rels),
                    sizes=_attr_text(link, "sizes"),
                    type=_attr_text(link, "type"),
                )
            )
        return icons


def _rel_values(tag) -> List[str]:
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return [str(r).lower() for r in rel]


def _attr_text(tag, name: str) -> Optional[str]:
    value = tag.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(str(v) for v in value)
    return str(value)
