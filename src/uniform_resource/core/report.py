"""Plain-dict summaries of resources and visits (JSON friendly)."""

from __future__ import annotations

from typing import Any, Dict, List

from uniform_resource.core.resource import (
    Resource,
    all_transformation_remarks,
    is_followed_resource,
    is_invalid_resource,
    is_transformed_resource,
)
from uniform_resource.core.scraping.visits import VisitResult


def summarize_visit(visit: VisitResult) -> Dict[str, Any]:
    summary: Dict[str, Any] = {"kind": visit.kind.value, "url": visit.url}
    for name in ("status", "redirect_url", "content_type"):
        value = getattr(visit, name, None)
        if value is not None:
            summary[name] = value
    error = getattr(visit, "error", None)
    if error is not None:
        summary["error"] = str(error)
    return summary


def summarize_resource(resource: Resource) -> Dict[str, Any]:
    summary: Dict[str, Any] = {
        "kind": resource.kind.value,
        "uri": resource.uri,
        "label": resource.label,
        "provenance": resource.provenance.urn,
    }
    if is_transformed_resource(resource):
        summary["pipe_position"] = resource.pipe_position
        summary["remarks"] = all_transformation_remarks(resource)
    if is_followed_resource(resource):
        visits: List[Dict[str, Any]] = [summarize_visit(v) for v in resource.visits]
        summary["visits"] = visits
        summary["terminal_status"] = getattr(resource.terminal_result, "status", None)
    if is_invalid_resource(resource):
        summary["error"] = str(resource.error)
    if resource.governed_content is not None:
        summary["content_type"] = resource.governed_content.content_type
    if resource.curatable_content is not None:
        content = resource.curatable_content
        summary["title"] = content.title
        og = content.social_graph.open_graph if content.social_graph else None
        if og is not None:
            summary["open_graph_type"] = og.type
    if resource.readable_content is not None:
        summary["readable_excerpt"] = resource.readable_content.excerpt
    if resource.download is not None:
        download = resource.download
        summary["download"] = download.outcome.value
        dest = getattr(download, "dest_path", None)
        if dest is not None:
            summary["download_path"] = str(dest)
        file_type = getattr(download, "file_type", None)
        if file_type is not None:
            summary["download_mime"] = file_type.mime
    if resource.favicon is not None:
        summary["favicon"] = resource.favicon.uri
    return summary
