"""
Pytest configuration and fixtures for web font harvester tests.
"""

import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from fontgrab.core.config import AppConfig, DownloadConfig, ExtractorConfig, HttpConfig
from fontgrab.core.models import FontFormat, FontRecord


def make_response(status_code=200, text="", content=b"", headers=None, encoding="utf-8"):
    """Build a Mock standing in for a requests.Response; ``content`` defaults to ``text`` as UTF-8."""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.text = text
    response.content = content or text.encode("utf-8")
    response.encoding = encoding
    response.apparent_encoding = "utf-8"
    response.headers = headers or {}
    return response


class FakeSession:
    """
    Minimal requests.Session replacement serving canned responses by url.

    Values may be a response, or an exception instance to raise. Unknown
    urls answer 404. Every call is recorded in ``calls``.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": dict(headers or {}), "timeout": timeout})
        route = self.routes.get(url)
        if isinstance(route, Exception):
            raise route
        if route is None:
            return make_response(status_code=404)
        return route

    def requested_urls(self):
        return [call["url"] for call in self.calls]

    def close(self):
        self.closed = True


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def http_config():
    """HTTP configuration with defaults, isolated from any local .env."""
    return HttpConfig(_env_file=None)


@pytest.fixture
def extractor_config():
    """Extractor configuration."""
    return ExtractorConfig(_env_file=None)


@pytest.fixture
def download_config():
    """Download configuration."""
    return DownloadConfig(_env_file=None)


@pytest.fixture
def app_config():
    """Application configuration."""
    return AppConfig(_env_file=None)


@pytest.fixture
def fake_session():
    """Empty fake session; tests add routes as needed."""
    return FakeSession()


@pytest.fixture
def sample_fonts():
    """A small discovery result spanning two families and an inline payload."""
    return [
        FontRecord(
            name="Inter-Regular.woff2",
            family="Inter",
            format=FontFormat.WOFF2,
            url="https://cdn.example.com/fonts/Inter-Regular.woff2",
            weight="400",
            style="normal",
            referer="https://example.com/css/site.css",
        ),
        FontRecord(
            name="Inter-Bold.woff2",
            family="Inter",
            format=FontFormat.WOFF2,
            url="https://cdn.example.com/fonts/Inter-Bold.woff2",
            weight="700",
            style="normal",
            referer="https://example.com/css/site.css",
        ),
        FontRecord(
            name="Roboto-BoldItalic.woff",
            family="Roboto-BoldItalic",
            format=FontFormat.WOFF,
            url="https://cdn.example.com/fonts/Roboto-BoldItalic.woff",
            referer="https://example.com/",
        ),
        FontRecord(
            name="icons-embedded",
            family="Icons",
            format=FontFormat.WOFF2,
            url="data:font/woff2;base64,AAEC",
            referer="https://example.com/",
        ),
    ]


@pytest.fixture
def response_factory():
    """Factory for canned HTTP responses."""
    return make_response
