"""
Font Extractor Tests
====================

Tests for page scanning, stylesheet traversal and result ordering, using a
fake HTTP session.
"""

from unittest.mock import patch

import pytest
import requests

from fontgrab.core.config import ExtractorConfig
from fontgrab.core.exceptions import (
    ContentDecodeError,
    HTTPStatusError,
    InvalidTargetUrlError,
    NetworkConnectionError,
    NetworkTimeoutError,
)
from fontgrab.core.models import FontFormat, FontRecord
from fontgrab.discovery.extractor import (
    FontExtractor,
    dedupe_fonts,
    extract_fonts_from_url,
    fetch_text,
    sort_fonts,
)

PAGE_URL = "https://example.com/"


def font_face(family, url, weight="400", style="normal"):
    return (
        f"@font-face {{ font-family: '{family}'; src: url({url}) format('woff2'); "
        f"font-weight: {weight}; font-style: {style}; }}\n"
    )


class TestFetchText:
    """Test the shared page/stylesheet fetch."""

    def test_headers_and_timeout(self, fake_session, response_factory, http_config):
        """Test Accept, Referer and the page timeout are sent."""
        fake_session.routes[PAGE_URL] = response_factory(text="<html></html>")

        body = fetch_text(fake_session, PAGE_URL, http_config, referer="https://ref.test/")

        assert body == "<html></html>"
        call = fake_session.calls[0]
        assert call["headers"]["Accept"] == http_config.page_accept
        assert call["headers"]["Referer"] == "https://ref.test/"
        assert call["timeout"] == http_config.page_timeout

    def test_non_success_status(self, fake_session, response_factory, http_config):
        """Test non-2xx responses raise HTTPStatusError."""
        fake_session.routes[PAGE_URL] = response_factory(status_code=503)

        with pytest.raises(HTTPStatusError) as exc_info:
            fetch_text(fake_session, PAGE_URL, http_config)

        assert exc_info.value.status_code == 503

    @pytest.mark.parametrize(
        "error,expected",
        [
            (requests.ConnectTimeout("slow"), NetworkTimeoutError),
            (requests.ReadTimeout("slow"), NetworkTimeoutError),
            (requests.exceptions.InvalidURL("bad"), InvalidTargetUrlError),
            (requests.ConnectionError("refused"), NetworkConnectionError),
        ],
    )
    def test_transport_errors(self, fake_session, http_config, error, expected):
        """Test transport failures map to network errors."""
        fake_session.routes[PAGE_URL] = error

        with pytest.raises(expected):
            fetch_text(fake_session, PAGE_URL, http_config)

    def test_body_decoded_with_declared_charset(self, fake_session, response_factory, http_config):
        """Test the body is decoded with the response charset."""
        fake_session.routes[PAGE_URL] = response_factory(
            content="<p>café</p>".encode("latin-1"), encoding="ISO-8859-1"
        )

        assert fetch_text(fake_session, PAGE_URL, http_config) == "<p>café</p>"

    def test_undecodable_body(self, fake_session, response_factory, http_config):
        """Test bytes invalid in the declared charset raise ContentDecodeError."""
        fake_session.routes[PAGE_URL] = response_factory(content=b"\xff\xfe\xfa", encoding="utf-8")

        with pytest.raises(ContentDecodeError) as exc_info:
            fetch_text(fake_session, PAGE_URL, http_config)

        assert PAGE_URL in str(exc_info.value)

    def test_unknown_charset(self, fake_session, response_factory, http_config):
        """Test a charset Python does not know raises ContentDecodeError."""
        fake_session.routes[PAGE_URL] = response_factory(content=b"body", encoding="x-no-such-codec")

        with pytest.raises(ContentDecodeError):
            fetch_text(fake_session, PAGE_URL, http_config)


class TestFontExtractor:
    """Test FontExtractor traversal."""

    @pytest.fixture
    def extractor(self, fake_session, http_config, extractor_config):
        """Extractor bound to the fake session."""
        return FontExtractor(http_config, extractor_config, session=fake_session)

    def test_inline_style_and_linked_stylesheet(self, extractor, fake_session, response_factory):
        """Test fonts from <style> and <link rel=stylesheet> are both collected."""
        html = f"""
        <html><head>
          <style>{font_face("Inline Sans", "/fonts/inline.woff2")}</style>
          <link rel="stylesheet" href="/css/site.css">
        </head></html>
        """
        fake_session.routes[PAGE_URL] = response_factory(text=html)
        fake_session.routes["https://example.com/css/site.css"] = response_factory(
            text=font_face("Linked Serif", "../fonts/linked.woff2")
        )

        fonts = extractor.extract(PAGE_URL)

        by_family = {font.family: font for font in fonts}
        assert set(by_family) == {"Inline Sans", "Linked Serif"}
        assert by_family["Inline Sans"].url == "https://example.com/fonts/inline.woff2"
        assert by_family["Inline Sans"].referer == PAGE_URL
        assert by_family["Linked Serif"].url == "https://example.com/fonts/linked.woff2"
        assert by_family["Linked Serif"].referer == "https://example.com/css/site.css"

    def test_stylesheet_fetched_with_page_referer(self, extractor, fake_session, response_factory):
        """Test linked stylesheets are requested with the page as Referer."""
        fake_session.routes[PAGE_URL] = response_factory(
            text='<link rel="stylesheet" href="a.css">'
        )
        fake_session.routes["https://example.com/a.css"] = response_factory(text="")

        extractor.extract(PAGE_URL)

        css_call = fake_session.calls[1]
        assert css_call["url"] == "https://example.com/a.css"
        assert css_call["headers"]["Referer"] == PAGE_URL

    def test_import_cycle_visits_each_stylesheet_once(
        self, extractor, fake_session, response_factory
    ):
        """Test mutually importing stylesheets terminate and are fetched once."""
        fake_session.routes[PAGE_URL] = response_factory(
            text='<link rel="stylesheet" href="/a.css">'
        )
        fake_session.routes["https://example.com/a.css"] = response_factory(
            text='@import "b.css";' + font_face("A", "a.woff2")
        )
        fake_session.routes["https://example.com/b.css"] = response_factory(
            text='@import url("a.css");' + font_face("B", "b.woff2")
        )

        fonts = extractor.extract(PAGE_URL)

        assert sorted(font.family for font in fonts) == ["A", "B"]
        assert fake_session.requested_urls().count("https://example.com/a.css") == 1
        assert fake_session.requested_urls().count("https://example.com/b.css") == 1

    def test_import_cycle_with_different_url_spelling(
        self, extractor, fake_session, response_factory
    ):
        """Test a self-import spelled with another host case and port is not refetched."""
        fake_session.routes[PAGE_URL] = response_factory(
            text='<link rel="stylesheet" href="/a.css">'
        )
        fake_session.routes["https://example.com/a.css"] = response_factory(
            text='@import url("https://EXAMPLE.com:443/a.css");' + font_face("A", "a.woff2")
        )

        fonts = extractor.extract(PAGE_URL)

        assert fake_session.requested_urls() == [PAGE_URL, "https://example.com/a.css"]
        assert [font.url for font in fonts] == ["https://example.com/a.woff2"]

    def test_import_depth_bound(self, fake_session, response_factory, http_config):
        """Test imports deeper than the configured bound are not fetched."""
        extractor = FontExtractor(
            http_config, ExtractorConfig(_env_file=None, max_import_depth=1), session=fake_session
        )
        fake_session.routes[PAGE_URL] = response_factory(
            text='<link rel="stylesheet" href="/0.css">'
        )
        for depth in range(3):
            fake_session.routes[f"https://example.com/{depth}.css"] = response_factory(
                text=f'@import "{depth + 1}.css";' + font_face(f"Depth{depth}", f"{depth}.woff2")
            )

        fonts = extractor.extract(PAGE_URL)

        assert sorted(font.family for font in fonts) == ["Depth0", "Depth1"]
        assert "https://example.com/2.css" not in fake_session.requested_urls()

    def test_inline_style_imports_followed(self, extractor, fake_session, response_factory):
        """Test @import inside a <style> block is fetched."""
        fake_session.routes[PAGE_URL] = response_factory(
            text="<style>@import url('/fonts.css');</style>"
        )
        fake_session.routes["https://example.com/fonts.css"] = response_factory(
            text=font_face("Imported", "/imported.woff2")
        )

        fonts = extractor.extract(PAGE_URL)

        assert [font.family for font in fonts] == ["Imported"]

    def test_failed_stylesheet_is_skipped(self, extractor, fake_session, response_factory):
        """Test an unreachable stylesheet does not fail the scan."""
        fake_session.routes[PAGE_URL] = response_factory(
            text=(
                '<link rel="stylesheet" href="/missing.css">'
                '<link rel="stylesheet" href="/broken.css">'
                f"<style>{font_face('Kept', '/kept.woff2')}</style>"
            )
        )
        fake_session.routes["https://example.com/broken.css"] = requests.ConnectionError("reset")

        fonts = extractor.extract(PAGE_URL)

        assert [font.family for font in fonts] == ["Kept"]

    def test_page_failure_raises(self, extractor, fake_session, response_factory):
        """Test a failing page fetch propagates."""
        fake_session.routes[PAGE_URL] = response_factory(status_code=404)

        with pytest.raises(HTTPStatusError):
            extractor.extract(PAGE_URL)

    def test_preload_links(self, extractor, fake_session, response_factory):
        """Test preload hints for fonts and styles are honored."""
        fake_session.routes[PAGE_URL] = response_factory(
            text=(
                '<link rel="preload" as="font" href="/fonts/Preloaded-Bold.woff2" crossorigin>'
                '<link rel="prefetch" as="style" href="/late.css">'
                '<link rel="preload" as="image" href="/hero.png">'
            )
        )
        fake_session.routes["https://example.com/late.css"] = response_factory(
            text=font_face("Late", "/late.woff2")
        )

        fonts = extractor.extract(PAGE_URL)

        by_family = {font.family: font for font in fonts}
        assert set(by_family) == {"Late", "Preloaded-Bold"}
        preloaded = by_family["Preloaded-Bold"]
        assert preloaded.name == "Preloaded-Bold.woff2"
        assert preloaded.format is FontFormat.WOFF2
        assert preloaded.weight == "400"
        assert preloaded.referer == PAGE_URL
        assert "https://example.com/hero.png" not in fake_session.requested_urls()

    def test_preloaded_fonts_can_be_disabled(self, fake_session, response_factory, http_config):
        """Test preloaded font links are ignored when disabled."""
        extractor = FontExtractor(
            http_config,
            ExtractorConfig(_env_file=None, include_preloaded_fonts=False),
            session=fake_session,
        )
        fake_session.routes[PAGE_URL] = response_factory(
            text='<link rel="preload" as="font" href="/a.woff2">'
        )

        assert extractor.extract(PAGE_URL) == []

    def test_duplicate_urls_keep_first(self, extractor, fake_session, response_factory):
        """Test records sharing a url are reported once."""
        fake_session.routes[PAGE_URL] = response_factory(
            text=(
                f"<style>{font_face('First', '/same.woff2')}</style>"
                f"<style>{font_face('Second', '/same.woff2')}</style>"
            )
        )

        fonts = extractor.extract(PAGE_URL)

        assert len(fonts) == 1
        assert fonts[0].family == "First"

    def test_extract_fonts_from_url_closes_session(self, fake_session, response_factory):
        """Test the one-off helper closes its session."""
        fake_session.routes[PAGE_URL] = response_factory(text="<html></html>")

        with patch("fontgrab.discovery.extractor.create_session", return_value=fake_session):
            assert extract_fonts_from_url(PAGE_URL) == []

        assert fake_session.closed is True


class TestOrdering:
    """Test deduplication and sort order."""

    def test_sort_order(self):
        """Test family, upright-first, distance from 400, then name ordering."""
        fonts = [
            FontRecord(name="b-italic", family="B", url="https://x.test/1", style="italic"),
            FontRecord(name="b-900", family="B", url="https://x.test/2", weight="900"),
            FontRecord(name="b-bold", family="B", url="https://x.test/3", weight="bold"),
            FontRecord(name="b-400", family="b", url="https://x.test/4"),
            FontRecord(name="a", family="A", url="https://x.test/5"),
        ]

        assert [font.name for font in sort_fonts(fonts)] == [
            "a",
            "b-400",
            "b-bold",
            "b-900",
            "b-italic",
        ]

    def test_dedupe_keeps_first(self):
        """Test the first record per url survives."""
        fonts = [
            FontRecord(name="one", family="A", url="https://x.test/a"),
            FontRecord(name="two", family="B", url="https://x.test/a"),
        ]

        assert [font.name for font in dedupe_fonts(fonts)] == ["one"]
