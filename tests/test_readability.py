import json

from uniform_resource.content import readability
from uniform_resource.content.readability import (
    SoupReadableExtractor,
    TrafilaturaExtractor,
)

PAGE = """
<html lang="en">
<head><title>Story</title><script>var x = 1;</script></head>
<body>
  <nav>Home | World</nav>
  <article>
    <h1>Big news</h1>
    <p>First paragraph.</p>
    <p>Second paragraph.</p>
  </article>
  <footer>Copyright</footer>
</body>
</html>
"""


def test_soup_extractor_keeps_article_text():
    content = SoupReadableExtractor().extract(PAGE, "https://a.test/story")

    assert content.extractor == "soup"
    assert content.text == "Big news\nFirst paragraph.\nSecond paragraph."
    assert content.title == "Story"
    assert content.excerpt == "Big news"
    assert content.language == "en"
    assert "Copyright" not in content.text


def test_soup_extractor_empty_page():
    content = SoupReadableExtractor().extract("", "https://a.test/")
    assert content.text is None
    assert content.excerpt is None


def test_trafilatura_extractor_maps_json(monkeypatch):
    calls = {}

    def fake_extract(html, **kwargs):
        calls.update(kwargs)
        return json.dumps(
            {
                "title": "Big news",
                "author": "Jane Roe",
                "date": "2024-05-01",
                "text": "First paragraph.\nSecond paragraph.",
                "excerpt": "First paragraph.",
                "language": "en",
            }
        )

    monkeypatch.setattr(readability.trafilatura, "extract", fake_extract)
    content = TrafilaturaExtractor().extract(PAGE, "https://a.test/story")

    assert calls["url"] == "https://a.test/story"
    assert calls["output_format"] == "json"
    assert content.extractor == "trafilatura"
    assert content.title == "Big news"
    assert content.author == "Jane Roe"
    assert content.published == "2024-05-01"
    assert content.text.startswith("First paragraph.")


def test_trafilatura_extractor_nothing_found(monkeypatch):
    monkeypatch.setattr(readability.trafilatura, "extract", lambda html, **kw: None)
    content = TrafilaturaExtractor().extract("<html></html>", "https://a.test/")
    assert content.text is None
    assert content.metadata == {}
