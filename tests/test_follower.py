import asyncio
import time

import pytest
import requests

from conftest import FakeFetcher, FakeResponse, html_page, meta_refresh, redirect
from uniform_resource.core.config import FollowOptions
from uniform_resource.core.errors import (
    FetchTimeoutError,
    MalformedRedirectError,
    RedirectDepthExceededError,
)
from uniform_resource.core.scraping.follower import (
    RedirectFollower,
    extract_meta_refresh_url,
)
from uniform_resource.core.scraping.visits import (
    ContentRedirectResult,
    HttpRedirectResult,
    TerminalResult,
    TerminalTextContentResult,
    VisitError,
)


def follow(routes, url, **options):
    fetcher = FakeFetcher(routes)
    follower = RedirectFollower(fetcher=fetcher, options=FollowOptions(**options))
    return asyncio.run(follower.follow(url)), fetcher


def test_no_redirect_is_single_terminal_visit():
    visits, fetcher = follow({"https://a.test/": html_page(body="<p>hi</p>")}, "https://a.test/")

    assert len(visits) == 1
    assert isinstance(visits[0], TerminalTextContentResult)
    assert visits[0].content_text == "<p>hi</p>"
    assert visits[0].mime_type.essence == "text/html"
    assert fetcher.calls[0]["allow_redirects"] is False


def test_http_and_meta_redirects_yield_one_visit_per_hop(short_link_fetcher):
    follower = RedirectFollower(fetcher=short_link_fetcher)
    visits = asyncio.run(follower.follow("https://t.co/ELrZmo81wI"))

    assert len(visits) == 5
    assert isinstance(visits[0], ContentRedirectResult)
    assert visits[0].redirect_url == "https://fxn.ws/2Q3wI0P"
    assert [type(v) for v in visits[1:4]] == [HttpRedirectResult] * 3
    assert [v.status for v in visits[1:4]] == [301, 302, 307]
    assert isinstance(visits[-1], TerminalTextContentResult)
    for previous, current in zip(visits, visits[1:]):
        assert previous.redirect_url == current.url


def test_redirect_without_location_is_visit_error():
    visits, _ = follow({"https://a.test/": redirect(None, 302)}, "https://a.test/")

    assert len(visits) == 1
    assert isinstance(visits[0], VisitError)
    assert isinstance(visits[0].error, MalformedRedirectError)
    assert visits[0].error.status == 302


def test_relative_location_is_resolved():
    routes = {
        "https://a.test/old/page": redirect("../new/page", 301),
        "https://a.test/new/page": html_page(),
    }
    visits, _ = follow(routes, "https://a.test/old/page")

    assert visits[0].redirect_url == "https://a.test/new/page"
    assert visits[-1].url == "https://a.test/new/page"


def test_redirect_loop_exceeds_depth():
    routes = {
        "https://a.test/1": redirect("https://a.test/2"),
        "https://a.test/2": redirect("https://a.test/1"),
    }
    with pytest.raises(RedirectDepthExceededError) as excinfo:
        follow(routes, "https://a.test/1", max_redirect_depth=4)

    assert excinfo.value.max_depth == 4
    assert len(excinfo.value.visits) == 4


def test_chain_at_exactly_max_depth_succeeds():
    routes = {
        "https://a.test/1": redirect("https://a.test/2"),
        "https://a.test/2": redirect("https://a.test/3"),
        "https://a.test/3": html_page(),
    }
    visits, _ = follow(routes, "https://a.test/1", max_redirect_depth=3)
    assert len(visits) == 3


def test_timeout_becomes_visit_error():
    routes = {"https://slow.test/": requests.Timeout("read timed out")}
    visits, fetcher = follow(routes, "https://slow.test/", fetch_timeout_ms=500)

    assert isinstance(visits[-1], VisitError)
    assert isinstance(visits[-1].error, requests.Timeout)
    assert fetcher.calls[0]["timeout"] == 0.5


class TricklingResponse(FakeResponse):
    """Serves its body one small chunk at a time with a pause between chunks."""

    def iter_content(self, chunk_size: int = 8192):
        for start in range(0, len(self.content), 64):
            time.sleep(0.2)
            yield self.content[start : start + 64]


def test_slow_body_is_cut_off_at_fetch_timeout():
    body = "<html><body>" + "x" * 640 + "</body></html>"
    slow = TricklingResponse(headers={"Content-Type": "text/html"}, text=body)
    started = time.monotonic()
    visits, _ = follow({"https://drip.test/": slow}, "https://drip.test/", fetch_timeout_ms=300)
    elapsed = time.monotonic() - started

    assert elapsed < 1.5
    assert len(visits) == 1
    assert isinstance(visits[0], VisitError)
    assert isinstance(visits[0].error, FetchTimeoutError)
    assert visits[0].error.timeout_ms == 300


class StallingFetcher(FakeFetcher):
    def get(self, url: str, headers=None, **kwargs):
        time.sleep(0.6)
        return super().get(url, headers, **kwargs)


def test_stalled_hop_is_abandoned_at_fetch_timeout():
    fetcher = StallingFetcher({"https://stall.test/": html_page()})
    follower = RedirectFollower(fetcher=fetcher, options=FollowOptions(fetch_timeout_ms=200))
    visits = asyncio.run(follower.follow("https://stall.test/"))

    assert isinstance(visits[-1], VisitError)
    assert isinstance(visits[-1].error, FetchTimeoutError)
    assert visits[-1].url == "https://stall.test/"


def test_unresolvable_host_is_visit_error():
    visits, _ = follow({}, "https://t")
    assert len(visits) == 1
    assert isinstance(visits[0], VisitError)


def test_scheme_less_url_defaults_to_http():
    visits, fetcher = follow({"http://a.test/x": html_page()}, "a.test/x")
    assert fetcher.urls == ["http://a.test/x"]
    assert visits[0].url == "http://a.test/x"


def test_tracking_codes_stripped_before_fetch_when_enabled():
    routes = {"https://a.test/x?id=1": html_page()}
    visits, fetcher = follow(
        routes, "https://a.test/x?id=1&utm_source=mail", strip_tracking_codes=True
    )
    assert fetcher.urls == ["https://a.test/x?id=1"]
    assert isinstance(visits[0], TerminalResult)


def test_error_status_is_terminal_without_content():
    routes = {"https://a.test/gone": html_page(status=404, body="<p>not found</p>")}
    visits, _ = follow(routes, "https://a.test/gone")

    assert type(visits[0]) is TerminalResult
    assert visits[0].status == 404


def test_binary_response_is_terminal_without_content():
    pdf = FakeResponse(200, {"Content-Type": "application/pdf"}, content=b"%PDF-1.4")
    visits, _ = follow({"https://a.test/doc.pdf": pdf}, "https://a.test/doc.pdf")

    assert type(visits[0]) is TerminalResult
    assert visits[0].content_type == "application/pdf"
    assert pdf.closed


def test_request_headers_carry_user_agent_and_accept():
    _, fetcher = follow({"https://a.test/": html_page()}, "https://a.test/", user_agent="UA/1.0")
    headers = fetcher.calls[0]["headers"]
    assert headers["User-Agent"] == "UA/1.0"
    assert headers["Accept"] == "text/html"


def test_meta_refresh_to_relative_target():
    routes = {
        "https://a.test/dir/": meta_refresh("next.html"),
        "https://a.test/dir/next.html": html_page(),
    }
    visits, _ = follow(routes, "https://a.test/dir/")
    assert visits[0].redirect_url == "https://a.test/dir/next.html"
    assert len(visits) == 2


def test_extract_meta_refresh_url():
    assert (
        extract_meta_refresh_url('<meta http-equiv="refresh" content="0; url=https://x.test/?a=1&amp;b=2">')
        == "https://x.test/?a=1&b=2"
    )
    assert extract_meta_refresh_url('<meta http-equiv="refresh" content="5;URL=https://x.test">') is None
    assert extract_meta_refresh_url("<html><body>plain</body></html>") is None
