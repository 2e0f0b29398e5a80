"""
CSS Scanning
============

Text-level scanning of stylesheets for ``@font-face`` rules and ``@import``
directives. This is deliberately not a CSS parser: only the patterns needed
to locate font sources are recognized.
"""

import logging
import re
from dataclasses import dataclass, field

from fontgrab.core.models import FontFormat, FontRecord

from .urls import file_name_from_url, is_data_url, resolve, resolve_stylesheet, slugify

logger = logging.getLogger(__name__)

FONT_FACE_RE = re.compile(r"@font-face\s*\{(.*?)\}", re.IGNORECASE | re.DOTALL)
IMPORT_RE = re.compile(
    r"""@import\s+(?:url\(\s*['"]?([^'")]+)['"]?\s*\)|['"]([^'"]+)['"])\s*[^;]*;""",
    re.IGNORECASE | re.DOTALL,
)
SRC_URL_RE = re.compile(
    r"""url\(\s*['"]?([^'")]+)['"]?\s*\)\s*(?:format\(\s*['"]?([^'")]+)['"]?\s*\))?""",
    re.IGNORECASE | re.DOTALL,
)

DEFAULT_WEIGHT = "400"
DEFAULT_STYLE = "normal"


@dataclass
class SourceCandidate:
    """One ``url()`` entry of a ``src`` descriptor."""

    url: str
    format: FontFormat


@dataclass
class StylesheetScan:
    """Everything found in one stylesheet body."""

    fonts: list[FontRecord] = field(default_factory=list)
    imports: list[str] = field(default_factory=list)


def parse_declarations(block: str) -> dict[str, str]:
    """
    Split a rule body into ``name: value`` pairs.

    Semicolons inside parentheses or quoted strings do not end a declaration,
    and backslash escapes are copied through untouched.
    """
    declarations: dict[str, str] = {}
    current: list[str] = []
    paren_depth = 0
    in_single_quote = False
    in_double_quote = False
    escaped = False

    for ch in block:
        if escaped:
            current.append(ch)
            escaped = False
            continue

        if ch == "\\":
            current.append(ch)
            escaped = True
            continue

        if ch == "'" and not in_double_quote:
            in_single_quote = not in_single_quote
        elif ch == '"' and not in_single_quote:
            in_double_quote = not in_double_quote
        elif not in_single_quote and not in_double_quote:
            if ch == "(":
                paren_depth += 1
            elif ch == ")":
                paren_depth = max(paren_depth - 1, 0)

        if ch == ";" and paren_depth == 0 and not in_single_quote and not in_double_quote:
            _push_declaration(declarations, "".join(current))
            current = []
            continue

        current.append(ch)

    _push_declaration(declarations, "".join(current))
    return declarations


def _push_declaration(declarations: dict[str, str], raw_declaration: str) -> None:
    trimmed = raw_declaration.strip()
    if not trimmed:
        return

    name, sep, value = trimmed.partition(":")
    if not sep:
        return

    declarations[name.strip().lower()] = value.strip()


def normalize_family_name(raw: str) -> str:
    return raw.strip().strip('"').strip("'")


def pick_best_source(src_value: str, base_url: str) -> SourceCandidate | None:
    """Choose the most preferred resolvable source of a ``src`` descriptor."""
    candidates = []

    for match in SRC_URL_RE.finditer(src_value):
        raw_url = (match.group(1) or "").strip()
        if not raw_url:
            continue

        resolved = resolve(base_url, raw_url)
        if resolved is None:
            continue

        font_format = FontFormat.from_hint(match.group(2))
        if font_format is FontFormat.UNKNOWN:
            font_format = FontFormat.from_url(raw_url)

        candidates.append(SourceCandidate(url=resolved, format=font_format))

    if not candidates:
        return None

    # sorted() is stable, so equal ranks keep declaration order
    return sorted(candidates, key=lambda candidate: candidate.format.rank)[0]


def find_imports(css: str, base_url: str) -> list[str]:
    imports = []
    for match in IMPORT_RE.finditer(css):
        raw_import = match.group(1) or match.group(2) or ""
        resolved = resolve_stylesheet(base_url, raw_import)
        if resolved is not None:
            imports.append(resolved)
    return imports


def find_font_faces(css: str, base_url: str, referer: str) -> list[FontRecord]:
    """Build one record per usable ``@font-face`` rule in ``css``."""
    fonts = []

    for match in FONT_FACE_RE.finditer(css):
        declarations = parse_declarations(match.group(1))

        family_raw = declarations.get("font-family")
        src_raw = declarations.get("src")
        if family_raw is None or src_raw is None:
            continue

        family = normalize_family_name(family_raw)
        if not family:
            continue

        best_source = pick_best_source(src_raw, base_url)
        if best_source is None:
            logger.debug(f"No resolvable source for @font-face {family!r}")
            continue

        fonts.append(
            FontRecord(
                name=_record_name(family, best_source),
                family=family,
                format=best_source.format,
                url=best_source.url,
                weight=declarations.get("font-weight", DEFAULT_WEIGHT),
                style=declarations.get("font-style", DEFAULT_STYLE),
                referer=referer,
            )
        )

    return fonts


def _record_name(family: str, source: SourceCandidate) -> str:
    if is_data_url(source.url):
        return f"{slugify(family)}-embedded"
    return file_name_from_url(source.url) or f"{slugify(family)}-{source.format.value}"


def parse_css(css: str, base_url: str, referer: str) -> StylesheetScan:
    """Scan a stylesheet body found at ``base_url``."""
    return StylesheetScan(
        fonts=find_font_faces(css, base_url, referer),
        imports=find_imports(css, base_url),
    )
