import asyncio

import requests

from conftest import FakeFetcher, FakeResponse, html_page
from uniform_resource.core.config import DownloadOptions
from uniform_resource.core.errors import DownloadError
from uniform_resource.core.interfaces import TransformerContext
from uniform_resource.core.pipeline import transformation_pipe
from uniform_resource.core.resource import Resource
from uniform_resource.core.scraping.downloader import (
    DownloadOutcome,
    TypicalDownloader,
    is_download_error_result,
    is_download_file_result,
    is_download_indeterminate_result,
    is_download_skip_result,
    is_download_success_result,
    parse_content_disposition,
)
from uniform_resource.core.scraping.follower import RedirectFollower
from uniform_resource.transformers import (
    DownloadContent,
    DownloadHttpContentTypes,
    FollowRedirectsGranular,
    pdfs_only,
)

CTX = TransformerContext()
PDF_BYTES = b"%PDF-1.4\n" + b"0" * 20000 + b"\n%%EOF"
PDF_URL = "https://files.example.com/report.pdf"


def pdf_response(**kwargs):
    headers = {
        "Content-Type": "application/pdf",
        "Content-Length": str(len(PDF_BYTES)),
        "Content-Disposition": 'attachment; filename="annual report.pdf"',
    }
    return FakeResponse(200, headers, content=PDF_BYTES, **kwargs)


def pipe_for(fetcher, *steps):
    follow = FollowRedirectsGranular(follower=RedirectFollower(fetcher=fetcher))
    return transformation_pipe(follow, *steps)


def download_step(fetcher, tmp_path, **options):
    downloader = TypicalDownloader(DownloadOptions(destination_directory=tmp_path, **options))
    return DownloadContent(downloader, fetcher=fetcher, chunk_size=4096)


def run(pipe, uri):
    return asyncio.run(pipe.transform(CTX, Resource(uri=uri, label="Report")))


def test_pdf_download_is_typed(tmp_path):
    fetcher = FakeFetcher({PDF_URL: pdf_response()})
    pipe = pipe_for(fetcher, pdfs_only(download_step(fetcher, tmp_path)))
    result = run(pipe, PDF_URL)

    download = result.download
    assert is_download_file_result(download)
    assert is_download_success_result(download)
    assert download.outcome is DownloadOutcome.TYPED
    assert download.file_type.mime == "application/pdf"
    assert download.dest_path.suffix == ".pdf"
    assert download.dest_path.parent == tmp_path
    assert download.dest_path.read_bytes() == PDF_BYTES
    assert download.size_expected == len(PDF_BYTES)
    assert download.stats.st_size == len(PDF_BYTES)
    assert len(download.sha256) == 64
    assert download.content_disposition.filename == "annual report.pdf"
    assert fetcher.urls == [PDF_URL, PDF_URL]


def test_filtered_download_leaves_other_types_alone(tmp_path):
    fetcher = FakeFetcher({"https://a.test/": html_page()})
    pipe = pipe_for(fetcher, pdfs_only(download_step(fetcher, tmp_path)))
    result = run(pipe, "https://a.test/")

    assert result.download is None
    assert list(tmp_path.iterdir()) == []


def test_content_type_filter_accepts_several_types(tmp_path):
    step = DownloadHttpContentTypes(None, "application/pdf", "Text/HTML")
    assert step.allows("text/html; charset=utf-8")
    assert step.allows("application/pdf")
    assert not step.allows("image/png")
    assert not step.allows(None)


def test_text_content_written_from_retained_body(tmp_path):
    fetcher = FakeFetcher({"https://a.test/": html_page(body="<!DOCTYPE html><html></html>")})
    pipe = pipe_for(fetcher, download_step(fetcher, tmp_path))
    result = run(pipe, "https://a.test/")

    assert is_download_file_result(result.download)
    assert result.download.file_type.extension == "html"
    assert len(fetcher.calls) == 1


def test_unknown_bytes_are_indeterminate(tmp_path):
    blob = FakeResponse(200, {"Content-Type": "application/octet-stream"}, content=b"\x01\x02\x03")
    fetcher = FakeFetcher({"https://a.test/blob": blob})
    pipe = pipe_for(fetcher, download_step(fetcher, tmp_path))
    result = run(pipe, "https://a.test/blob")

    assert is_download_indeterminate_result(result.download)
    assert result.download.dest_path.exists()
    assert "Unable to determine type" in result.download.unknown_file_type


def test_file_type_detection_can_be_disabled(tmp_path):
    fetcher = FakeFetcher({PDF_URL: pdf_response()})
    step = download_step(fetcher, tmp_path, determine_file_type=False)
    result = run(pipe_for(fetcher, step), PDF_URL)

    assert result.download.outcome is DownloadOutcome.SUCCESS
    assert result.download.dest_path.suffix == ""


def test_unfollowed_resource_is_skipped(tmp_path):
    step = download_step(FakeFetcher(), tmp_path)
    result = asyncio.run(step.transform(CTX, Resource(uri="https://a.test/", label="Home")))

    assert is_download_skip_result(result.download)
    assert result.download.reason == (
        "Unable to download, resource [Home](https://a.test/) was not traversed"
    )


def test_stream_failure_is_error_result(tmp_path):
    fetcher = FakeFetcher({PDF_URL: pdf_response(fail_after=2)})
    pipe = pipe_for(fetcher, download_step(fetcher, tmp_path))
    result = run(pipe, PDF_URL)

    download = result.download
    assert is_download_error_result(download)
    assert isinstance(download.error, DownloadError)
    assert isinstance(download.error.cause, requests.ConnectionError)
    assert download.size_downloaded == 2 * 4096
    assert download.size_expected == len(PDF_BYTES)
    assert list(tmp_path.iterdir()) == []


def test_parse_content_disposition():
    cd = parse_content_disposition("attachment; filename*=UTF-8''r%C3%A9sum%C3%A9.pdf")
    assert cd.type == "attachment"
    assert cd.filename == "résumé.pdf"

    cd = parse_content_disposition('inline; filename="a.pdf"')
    assert cd.type == "inline" and cd.filename == "a.pdf"

    assert parse_content_disposition(None) is None
    assert parse_content_disposition("inline").filename is None
