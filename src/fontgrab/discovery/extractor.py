"""
Font Extractor
==============

Fetches a page, walks its inline styles, linked stylesheets and ``@import``
chains, and produces a flat, URL-deduplicated, sorted list of font records.
"""

import logging

import requests
from bs4 import BeautifulSoup

from fontgrab.core.config import ExtractorConfig, HttpConfig
from fontgrab.core.exceptions import (
    ContentDecodeError,
    HTTPStatusError,
    InvalidTargetUrlError,
    NetworkConnectionError,
    NetworkError,
    NetworkTimeoutError,
    ParseError,
)
from fontgrab.core.models import FontFormat, FontRecord

from .css import DEFAULT_STYLE, DEFAULT_WEIGHT, parse_css
from .urls import family_from_name, file_name_from_url, resolve, resolve_stylesheet

logger = logging.getLogger(__name__)


def create_session(http_config: HttpConfig) -> requests.Session:
    """Create HTTP session with appropriate configuration."""
    session = requests.Session()
    session.verify = http_config.verify_ssl
    session.headers.update({"User-Agent": http_config.user_agent})
    return session


def fetch_text(
    session: requests.Session,
    url: str,
    http_config: HttpConfig,
    referer: str | None = None,
) -> str:
    """GET ``url`` and return its body as text, raising NetworkError on any failure."""
    headers = {"Accept": http_config.page_accept}
    if referer:
        headers["Referer"] = referer

    try:
        response = session.get(url, headers=headers, timeout=http_config.page_timeout)
    except requests.Timeout as e:
        raise NetworkTimeoutError(url) from e
    except (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema) as e:
        raise InvalidTargetUrlError(url) from e
    except requests.RequestException as e:
        raise NetworkConnectionError(url, str(e)) from e

    if not 200 <= response.status_code < 300:
        raise HTTPStatusError(url, response.status_code)

    # Strict decode: a body that does not match its declared charset is an error
    encoding = response.encoding or response.apparent_encoding or "utf-8"
    try:
        return response.content.decode(encoding)
    except (LookupError, UnicodeDecodeError) as e:
        raise ContentDecodeError(url, str(e)) from e


def link_rel_tokens(link) -> set[str]:
    rel = link.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return {token.lower() for token in rel}


def sort_key(font: FontRecord) -> tuple:
    """Family, then upright before italic, then weights nearest 400, then name and url."""
    return (
        font.family.lower(),
        is_italic(font.style),
        abs(weight_value(font.weight) - 400),
        font.name.lower(),
        font.url,
    )


def is_italic(style: str) -> int:
    return 1 if "italic" in style.lower() else 0


def weight_value(weight: str) -> int:
    normalized = weight.strip().lower()
    try:
        return int(normalized)
    except ValueError:
        return 700 if "bold" in normalized else 400


def dedupe_fonts(fonts: list[FontRecord]) -> list[FontRecord]:
    """Keep the first record for each url."""
    seen: set[str] = set()
    unique = []
    for font in fonts:
        if font.url in seen:
            continue
        seen.add(font.url)
        unique.append(font)
    return unique


def sort_fonts(fonts: list[FontRecord]) -> list[FontRecord]:
    return sorted(fonts, key=sort_key)


class FontExtractor:
    """
    Discovers web fonts referenced by a page.

    Features:
    - Inline ``<style>`` blocks and ``<link>`` stylesheets
    - Recursive ``@import`` resolution with a depth bound and cycle guard
    - Preloaded/prefetched font links
    - Best-source selection for multi-format ``src`` descriptors
    """

    def __init__(
        self,
        http_config: HttpConfig | None = None,
        extractor_config: ExtractorConfig | None = None,
        session: requests.Session | None = None,
    ):
        self.http_config = http_config or HttpConfig()
        self.config = extractor_config or ExtractorConfig()
        self.session = session or create_session(self.http_config)

    def extract(self, target_url: str) -> list[FontRecord]:
        """
        Discover fonts referenced by the page at ``target_url``.

        Args:
            target_url: Absolute page URL

        Returns:
            Deduplicated, sorted font records (possibly empty)

        Raises:
            NetworkError: If the page itself cannot be fetched
            ParseError: If the page body cannot be decoded
        """
        logger.info(f"Scanning {target_url} for fonts")
        html = fetch_text(self.session, target_url, self.http_config, referer=target_url)

        fonts: list[FontRecord] = []
        visited: set[str] = set()
        document = BeautifulSoup(html, "html.parser")

        for style in document.find_all("style"):
            css = "\n".join(style.strings)
            scan = parse_css(css, target_url, target_url)
            fonts.extend(scan.fonts)
            for import_url in scan.imports:
                self._fetch_and_parse_css(import_url, target_url, 0, visited, fonts)

        stylesheet_urls = []
        for link in document.find_all("link"):
            href = (link.get("href") or "").strip()
            if not href:
                continue

            rel = link_rel_tokens(link)
            as_attr = (link.get("as") or "").strip().lower()
            is_hint = bool(rel & {"preload", "prefetch"})

            if "stylesheet" in rel or (is_hint and as_attr == "style"):
                stylesheet_url = resolve_stylesheet(target_url, href)
                if stylesheet_url is not None:
                    stylesheet_urls.append(stylesheet_url)
            elif is_hint and as_attr == "font" and self.config.include_preloaded_fonts:
                font = self._preloaded_font(target_url, href)
                if font is not None:
                    fonts.append(font)

        for stylesheet_url in stylesheet_urls:
            self._fetch_and_parse_css(stylesheet_url, target_url, 0, visited, fonts)

        unique = dedupe_fonts(fonts)
        logger.info(
            f"Found {len(unique)} fonts on {target_url} "
            f"({len(fonts) - len(unique)} duplicates, {len(visited)} stylesheets)"
        )
        return sort_fonts(unique)

    def _fetch_and_parse_css(
        self,
        css_url: str,
        referer: str,
        depth: int,
        visited: set[str],
        out_fonts: list[FontRecord],
    ) -> None:
        if depth > self.config.max_import_depth or css_url in visited:
            return
        visited.add(css_url)

        try:
            css = fetch_text(self.session, css_url, self.http_config, referer=referer)
        except (NetworkError, ParseError) as e:
            logger.debug(f"Skipping stylesheet {css_url}: {e}")
            return

        scan = parse_css(css, css_url, css_url)
        out_fonts.extend(scan.fonts)

        for import_url in scan.imports:
            self._fetch_and_parse_css(import_url, css_url, depth + 1, visited, out_fonts)

    def _preloaded_font(self, target_url: str, href: str) -> FontRecord | None:
        resolved_url = resolve(target_url, href)
        if resolved_url is None:
            return None

        name = file_name_from_url(resolved_url) or "preloaded-font"
        return FontRecord(
            name=name,
            family=family_from_name(name),
            format=FontFormat.from_url(resolved_url),
            url=resolved_url,
            weight=DEFAULT_WEIGHT,
            style=DEFAULT_STYLE,
            referer=target_url,
        )

    def close(self) -> None:
        """Cleanup extractor resources."""
        self.session.close()


def extract_fonts_from_url(
    target_url: str,
    http_config: HttpConfig | None = None,
    extractor_config: ExtractorConfig | None = None,
) -> list[FontRecord]:
    """Run a one-off extraction with a fresh session."""
    extractor = FontExtractor(http_config, extractor_config)
    try:
        return extractor.extract(target_url)
    finally:
        extractor.close()
