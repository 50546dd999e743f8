"""
Tests for cluttarex/extractor.py: the assembler and the full pipeline.
"""
from unittest.mock import MagicMock, patch

import pytest
from bs4 import BeautifulSoup

from cluttarex.clutter import Denylist
from cluttarex.errors import FetchFailed, InternalError, MissingInput
from cluttarex.extractor import (
    ReaderExtractor,
    assemble,
    create_extractor,
    extract_article,
    extract_direction,
    extract_title,
)
from cluttarex.config import CluttarexConfig
from cluttarex.fetcher import ContentFetcher
from cluttarex.models import ArticleDocument, FetchedPage

BASE = "https://example.com/news/flood"


def parse(html):
    return BeautifulSoup(html, "html.parser")


class TestTitle:
    """Test the title fallback chain."""

    def test_title_tag_first(self):
        soup = parse("<html><head><title> Page  Title </title></head><body><h1>Heading</h1></body></html>")
        assert extract_title(soup) == "Page Title"

    def test_falls_back_to_first_h1(self):
        soup = parse("<body><h1>Hello</h1><h1>Second</h1></body>")
        assert extract_title(soup) == "Hello"

    def test_blank_title_falls_back_to_h1(self):
        soup = parse("<head><title>   </title></head><body><h1>Hello</h1></body>")
        assert extract_title(soup) == "Hello"

    def test_no_title_literal(self):
        soup = parse("<body><p>Nothing</p></body>")
        assert extract_title(soup) == "No Title"

    def test_pipeline_title_from_h1(self):
        article = extract_article("<body><h1>Hello</h1><p>Some text</p></body>", BASE)
        assert article.title == "Hello"

    def test_pipeline_no_title(self):
        article = extract_article("<body><p>Some text</p></body>", BASE)
        assert article.title == "No Title"


class TestDirection:
    @pytest.mark.parametrize("markup,expected", [
        ('<html dir="rtl"><body></body></html>', "rtl"),
        ('<html dir="RTL"><body></body></html>', "rtl"),
        ('<html dir="ltr"><body></body></html>', "ltr"),
        ('<html dir="auto"><body></body></html>', "ltr"),
        ("<html><body></body></html>", "ltr"),
        ("<p>fragment</p>", "ltr"),
    ])
    def test_direction(self, markup, expected):
        assert extract_direction(parse(markup)) == expected


class TestAssemble:
    def test_content_is_inner_markup(self):
        soup = parse("<html><body><main><p>One</p><p>Two</p></main></body></html>")
        article = assemble(soup, soup.main, BASE)

        assert article.content == "<p>One</p><p>Two</p>"
        assert article.url == BASE

    def test_text_content_whitespace_collapsed(self):
        soup = parse("<main><p>One\n\n   line</p><p>Two</p>\t<p> Three </p></main>")
        article = assemble(soup, soup.main)

        assert article.text_content == "One line Two Three"
        assert article.url is None


class TestExtractArticle:
    """Test the full pipeline."""

    def test_end_to_end_scenario(self):
        """Nav removed, image deduplicated, prose kept, link-dense block dropped."""
        prose = ("Long-form prose about the valley and its people. " * 12).strip()
        links = "".join(f'<a href="/l{i}">abcde</a>' for i in range(10))
        html = (
            "<html><body>"
            "<nav><a href='/'>Home</a></nav>"
            '<img src="https://x/y/abc1234567890.jpg">'
            '<img src="https://x/y/abc1234567890.jpg">'
            f"<p>{prose}</p>"
            f"<div>{links}</div>"
            "</body></html>"
        )
        article = extract_article(html, BASE)

        assert f"<p>{prose}</p>" in article.content
        assert article.content.count("<img") == 1
        assert "<nav" not in article.content
        assert "/l0" not in article.content
        assert "<div" not in article.content

    def test_realistic_page(self, article_page, prose):
        article = extract_article(article_page, BASE)

        assert article.title == "Flood Season in the Valley"
        assert article.direction == "ltr"
        assert prose in article.text_content
        assert "<script" not in article.content
        assert "<nav" not in article.content
        assert "Popular this week" not in article.content
        assert "3 hours ago" not in article.content
        assert "Tweet" not in article.content
        assert 'style=' not in article.content
        assert 'class=' not in article.content
        assert "<p></p>" not in article.content
        assert '<img src="https://example.com/images/river-crossing-2024.jpg"/>' in article.content
        assert 'href="https://example.com/reports/flood.pdf"' in article.content
        assert 'href="#comments"' in article.content
        assert 'href="mailto:desk@example.com"' in article.content

    def test_idempotent(self, article_page):
        """Running twice over the same source yields identical content."""
        first = extract_article(article_page, BASE)
        second = extract_article(article_page, BASE)

        assert first.content == second.content
        assert first == second

    def test_accepts_bytes(self):
        html = "<html><head><meta charset='utf-8'></head><body><p>Café ☕</p></body></html>"
        article = extract_article(html.encode("utf-8"), BASE)

        assert "Café ☕" in article.text_content

    def test_declared_encoding_used_for_bytes(self):
        """A latin-1 page without <meta charset> decodes with the given charset."""
        markup = "<html><body><p>Zürich Hauptbahnhof</p></body></html>".encode("iso-8859-1")
        article = extract_article(markup, BASE, encoding="iso-8859-1")

        assert article.text_content == "Zürich Hauptbahnhof"

    def test_encoding_ignored_for_text_markup(self):
        article = extract_article("<p>Zürich</p>", BASE, encoding="iso-8859-1")
        assert article.text_content == "Zürich"

    def test_rtl_document(self):
        article = extract_article('<html dir="rtl"><body><p>مرحبا</p></body></html>', BASE)
        assert article.direction == "rtl"

    def test_empty_markup_yields_empty_article(self):
        article = extract_article("", BASE)

        assert article.title == "No Title"
        assert article.content == ""
        assert article.text_content == ""

    def test_none_markup_is_missing_input(self):
        with pytest.raises(MissingInput):
            extract_article(None, BASE)

    def test_unexpected_failure_becomes_internal_error(self):
        with patch("cluttarex.extractor.remove_clutter", side_effect=RuntimeError("boom")):
            with pytest.raises(InternalError) as exc_info:
                extract_article("<p>x</p>", BASE)

        assert exc_info.value.details == "boom"
        assert exc_info.value.status_code == 500

    def test_custom_denylist(self):
        denylist = Denylist().extended(selectors=[".paywall"])
        html = '<body><div class="paywall">Subscribe now</div><p>Story</p></body>'
        article = extract_article(html, BASE, denylist)

        assert "Subscribe now" not in article.content


class TestReaderExtractor:
    """Test fetch-then-extract."""

    def test_read_uses_final_url_as_base(self):
        fetcher = MagicMock(spec=ContentFetcher)
        fetcher.fetch.return_value = FetchedPage(
            url="https://example.com/final/page",
            markup=b'<body><p>Text <a href="next">next</a></p></body>',
        )
        extractor = ReaderExtractor(fetcher=fetcher)
        article = extractor.read("https://example.com/start")

        fetcher.fetch.assert_called_once_with("https://example.com/start")
        assert 'href="https://example.com/final/next"' in article.content
        assert article.url == "https://example.com/final/page"

    def test_read_decodes_with_declared_charset(self):
        fetcher = MagicMock(spec=ContentFetcher)
        fetcher.fetch.return_value = FetchedPage(
            url="https://example.ch/news",
            markup="<body><p>Grüezi mitenand</p></body>".encode("iso-8859-1"),
            encoding="iso-8859-1",
            content_type="text/html; charset=iso-8859-1",
        )
        article = ReaderExtractor(fetcher=fetcher).read("https://example.ch/news")

        assert article.text_content == "Grüezi mitenand"

    def test_read_propagates_fetch_failure(self):
        fetcher = MagicMock(spec=ContentFetcher)
        fetcher.fetch.side_effect = FetchFailed("Failed to fetch URL: Not Found", status_code=404)
        extractor = ReaderExtractor(fetcher=fetcher)

        with pytest.raises(FetchFailed) as exc_info:
            extractor.read("https://example.com/missing")
        assert exc_info.value.status_code == 404

    def test_extract_local_document(self):
        extractor = ReaderExtractor()
        article = extractor.extract('<body><p>Hi <a href="/x">x</a></p></body>', base_url=BASE)

        assert isinstance(article, ArticleDocument)
        assert 'href="https://example.com/x"' in article.content


class TestCreateExtractor:
    def test_defaults(self):
        extractor = create_extractor()
        assert isinstance(extractor.fetcher, ContentFetcher)

    def test_from_config(self):
        config = CluttarexConfig(timeout=3, user_agent="Agent/2", verify_ssl=False,
                                 extra_clutter_selectors=[".paywall"],
                                 extra_clutter_phrases=["Support us"])
        extractor = create_extractor(config)

        assert extractor.fetcher.timeout == 3
        assert extractor.fetcher.user_agent == "Agent/2"
        assert extractor.fetcher.verify_ssl is False
        assert ".paywall" in extractor.denylist.selectors
        assert "support us" in extractor.denylist.phrases

    def test_fetcher_built_through_factory(self):
        config = CluttarexConfig(timeout=7)
        with patch("cluttarex.extractor.create_fetcher") as factory:
            extractor = create_extractor(config)

        factory.assert_called_once_with(
            timeout=7, user_agent=config.user_agent, verify_ssl=True
        )
        assert extractor.fetcher is factory.return_value
