"""
URL Resolution
==============

Normalizes user supplied site references and resolves the relative
references found in HTML and CSS against the document they came from.
"""

import logging
from urllib.parse import unquote, urljoin, urlsplit, urlunsplit

from fontgrab.core.models import DATA_URL_PREFIX

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_target(value: str) -> str:
    """Return ``value`` with an ``https://`` scheme unless it already has http(s)."""
    trimmed = value.strip()
    if trimmed.startswith(("http://", "https://")):
        return trimmed
    return f"https://{trimmed}"


def is_data_url(url: str) -> bool:
    return url.startswith(DATA_URL_PREFIX)


def remove_dot_segments(path: str) -> str:
    """Collapse ``.`` and ``..`` path segments, never climbing above the root."""
    segments = path.split("/")
    output: list[str] = []

    for segment in segments:
        if segment == "..":
            if len(output) > 1:
                output.pop()
        elif segment != ".":
            output.append(segment)

    if segments[-1] in (".", ".."):
        output.append("")
    return "/".join(output)


def canonical_url(url: str) -> str:
    """
    Spell an http(s) URL one way: lower-case scheme and host, no default
    port, no fragment, dot segments collapsed, ``/`` for an empty path.
    Other schemes are returned unchanged.

    Raises:
        ValueError: If the port is not a valid number
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme not in DEFAULT_PORTS or not parts.hostname:
        return url

    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"
    port = parts.port
    if port is not None and port != DEFAULT_PORTS[scheme]:
        host = f"{host}:{port}"

    userinfo, at, _ = parts.netloc.rpartition("@")
    netloc = f"{userinfo}{at}{host}"

    path = remove_dot_segments(parts.path) or "/"
    return urlunsplit((scheme, netloc, path, parts.query, ""))


def resolve(base: str, raw: str) -> str | None:
    """
    Resolve a reference found in a document at ``base``.

    Inline data payloads are returned unchanged. Absolute references are
    canonicalized, and anything else is joined against ``base`` first.
    Returns None when the reference cannot be turned into a usable URL.
    """
    reference = raw.strip()
    if not reference:
        return None

    if is_data_url(reference):
        return reference

    try:
        joined = reference if urlsplit(reference).scheme else urljoin(base, reference)
        if not urlsplit(joined).scheme:
            return None
        return canonical_url(joined)
    except ValueError as e:
        logger.debug(f"Skipping unparsable reference {reference!r}: {e}")
        return None


def resolve_stylesheet(base: str, raw: str) -> str | None:
    """Resolve a stylesheet reference; inline payloads cannot be fetched and yield None."""
    if raw.strip().startswith(DATA_URL_PREFIX):
        return None
    return resolve(base, raw)


def file_name_from_url(url: str) -> str | None:
    """Last non-empty path segment of ``url``, percent-decoded."""
    if is_data_url(url):
        return None

    try:
        path = urlsplit(url).path
    except ValueError:
        return None

    segment = path.rsplit("/", 1)[-1]
    if not segment:
        return None
    return unquote(segment)


def family_from_name(name: str) -> str:
    """Strip the last extension from a file name."""
    base, dot, _ = name.rpartition(".")
    return base if dot and base else name


def origin_of(url: str) -> str | None:
    """Serialize the scheme, host and port of ``url`` for an Origin header."""
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return None

    if not parts.scheme or not parts.hostname:
        return None

    origin = f"{parts.scheme}://{parts.hostname}"
    default_port = DEFAULT_PORTS.get(parts.scheme)
    if port is not None and port != default_port:
        origin = f"{origin}:{port}"
    return origin


def slugify(value: str) -> str:
    """Lower-case ASCII alphanumerics, collapsing everything else into single hyphens."""
    output = []
    previous_was_separator = False

    for character in value:
        if character.isascii() and character.isalnum():
            output.append(character.lower())
            previous_was_separator = False
        elif not previous_was_separator:
            output.append("-")
            previous_was_separator = True

    return "".join(output).strip("-")
