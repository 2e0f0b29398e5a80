"""
Family Fingerprinting
=====================

Collapses the inconsistent family names and file names found in the wild
(``OpenSansBold-webfont``, ``open-sans_700``, ``Roboto-BoldItalic``) into a
canonical token key, while peeling weight and style words off the end so
they can serve as variant hints.
"""

from dataclasses import dataclass

from fontgrab.core.models import FontRecord

DEFAULT_WEIGHT = "400"
DEFAULT_STYLE = "normal"
UNKNOWN_TOKEN = "unknown"

KNOWN_EXTENSIONS = (".woff2", ".woff", ".ttf", ".otf", ".eot", ".svg")

WEIGHT_SYNONYMS = {
    "thin": "100",
    "hairline": "100",
    "extralight": "200",
    "ultralight": "200",
    "light": "300",
    "semilight": "300",
    "regular": "400",
    "normal": "400",
    "book": "400",
    "medium": "500",
    "semibold": "600",
    "demibold": "600",
    "bold": "700",
    "extrabold": "800",
    "ultrabold": "800",
    "heavy": "800",
    "black": "900",
}

STYLE_SYNONYMS = {
    "italic": "italic",
    "oblique": "oblique",
}

# Trailing filename noise left behind by build tools
MARKER_TOKENS = {"s", "p"}


@dataclass(frozen=True)
class FamilyFingerprint:
    """Canonical grouping key plus any variant words removed to produce it."""

    key: str
    display: str
    weight_hint: str | None = None
    style_hint: str | None = None


def infer_family_fingerprint(font: FontRecord) -> FamilyFingerprint:
    tokens = tokenize_source(font.family)
    cleanup_file_tokens(tokens)
    weight_hint, style_hint = strip_variant_tokens(tokens)

    if not tokens:
        tokens = tokenize_source(font.name)
        cleanup_file_tokens(tokens)
        fallback_weight, fallback_style = strip_variant_tokens(tokens)
        weight_hint = weight_hint or fallback_weight
        style_hint = style_hint or fallback_style

    if not tokens:
        tokens = [UNKNOWN_TOKEN]

    return FamilyFingerprint(
        key=" ".join(tokens),
        display=" ".join(display_token(token) for token in tokens),
        weight_hint=weight_hint,
        style_hint=style_hint,
    )


def tokenize_source(value: str) -> list[str]:
    """Split a name into lower-cased word tokens."""
    source = strip_known_extension(value)
    tokens: list[str] = []
    chunk: list[str] = []

    for ch in source:
        if ch.isascii() and ch.isalnum():
            chunk.append(ch)
            continue
        if chunk:
            tokens.extend(split_camel_chunk("".join(chunk)))
            chunk = []

    if chunk:
        tokens.extend(split_camel_chunk("".join(chunk)))

    return tokens


def _is_upper(ch: str | None) -> bool:
    return ch is not None and ch.isascii() and ch.isupper()


def _is_lower(ch: str | None) -> bool:
    return ch is not None and ch.isascii() and ch.islower()


def split_camel_chunk(chunk: str) -> list[str]:
    """
    Split an alphanumeric run on camelCase boundaries.

    ``OpenSans`` -> ``open``, ``sans``; ``PTSerif`` -> ``pt``, ``serif``.
    """
    tokens = []
    start = 0

    for index in range(1, len(chunk)):
        current = chunk[index]
        previous = chunk[index - 1]
        following = chunk[index + 1] if index + 1 < len(chunk) else None

        acronym_to_word = _is_upper(current) and _is_upper(previous) and _is_lower(following)
        lower_to_upper = _is_upper(current) and _is_lower(previous)

        if acronym_to_word or lower_to_upper:
            token = chunk[start:index].lower()
            if token:
                tokens.append(token)
            start = index

    token = chunk[start:].lower()
    if token:
        tokens.append(token)

    return tokens


def strip_known_extension(value: str) -> str:
    lower = value.lower()
    for extension in KNOWN_EXTENSIONS:
        if lower.endswith(extension):
            return value[: -len(extension)]
    return value


def is_hash_token(token: str) -> bool:
    return len(token) >= 6 and all(ch in "0123456789abcdefABCDEF" for ch in token)


def cleanup_file_tokens(tokens: list[str]) -> None:
    """Drop trailing content hashes and marker tokens in place."""
    while tokens and (is_hash_token(tokens[-1]) or tokens[-1] in MARKER_TOKENS):
        tokens.pop()


def strip_variant_tokens(tokens: list[str]) -> tuple[str | None, str | None]:
    """Pop trailing style/weight words in place, returning ``(weight_hint, style_hint)``."""
    weight_hint = None
    style_hint = None

    while tokens:
        last = tokens[-1]

        if style_hint is None and last in STYLE_SYNONYMS:
            style_hint = STYLE_SYNONYMS[last]
            tokens.pop()
            continue

        if weight_hint is None and last in WEIGHT_SYNONYMS:
            weight_hint = WEIGHT_SYNONYMS[last]
            tokens.pop()
            continue

        break

    return weight_hint, style_hint


def display_token(token: str) -> str:
    if token.isdigit():
        return token
    if len(token) <= 2:
        return token.upper()
    return token[0].upper() + token[1:]


def normalize_style(value: str) -> str:
    normalized = value.strip().lower()
    if "italic" in normalized:
        return "italic"
    if "oblique" in normalized:
        return "oblique"
    return DEFAULT_STYLE


def normalize_weight(value: str) -> str:
    normalized = value.strip().lower()
    if not normalized:
        return DEFAULT_WEIGHT
    if normalized.isascii() and normalized.isdigit():
        return str(int(normalized))
    if normalized in WEIGHT_SYNONYMS:
        return WEIGHT_SYNONYMS[normalized]
    return normalized


# NOTE: a record that explicitly declares "normal"/"400" cannot be told apart
# from one that declares nothing, so a filename hint still wins over it.
def effective_style(font: FontRecord, style_hint: str | None) -> str:
    style = normalize_style(font.style)
    if style != DEFAULT_STYLE:
        return style
    return style_hint or DEFAULT_STYLE


def effective_weight(font: FontRecord, weight_hint: str | None) -> str:
    weight = normalize_weight(font.weight)
    if weight != DEFAULT_WEIGHT:
        return weight
    return weight_hint or DEFAULT_WEIGHT
