"""Pydantic models for type-safe data structures."""

from enum import Enum
from pathlib import Path
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

DATA_URL_PREFIX = "data:"


class FontFormat(str, Enum):
    """Web font container formats, declared in download preference order."""

    WOFF2 = "WOFF2"
    WOFF = "WOFF"
    OPENTYPE = "OPENTYPE"
    TRUETYPE = "TRUETYPE"
    EOT = "EOT"
    SVG = "SVG"
    UNKNOWN = "UNKNOWN"

    @property
    def rank(self) -> int:
        """Lower is better."""
        return _FORMAT_ORDER.index(self)

    @property
    def extension(self) -> str | None:
        return _FORMAT_EXTENSIONS.get(self)

    @classmethod
    def from_hint(cls, hint: str | None) -> "FontFormat":
        """Map a CSS ``format()`` hint (or a bare extension) to a format."""
        if not hint:
            return cls.UNKNOWN
        return _FORMAT_HINTS.get(hint.strip().strip("'\"").lower(), cls.UNKNOWN)

    @classmethod
    def from_url(cls, url: str) -> "FontFormat":
        """Infer the format from the extension of a URL path."""
        if url.startswith(DATA_URL_PREFIX):
            return cls.UNKNOWN
        path = urlsplit(url).path
        if "." not in path:
            return cls.UNKNOWN
        return cls.from_hint(path.rsplit(".", 1)[-1])


_FORMAT_ORDER = list(FontFormat)

_FORMAT_EXTENSIONS = {
    FontFormat.WOFF2: "woff2",
    FontFormat.WOFF: "woff",
    FontFormat.OPENTYPE: "otf",
    FontFormat.TRUETYPE: "ttf",
    FontFormat.EOT: "eot",
    FontFormat.SVG: "svg",
}

_FORMAT_HINTS = {
    "woff2": FontFormat.WOFF2,
    "woff2-variations": FontFormat.WOFF2,
    "woff": FontFormat.WOFF,
    "woff-variations": FontFormat.WOFF,
    "opentype": FontFormat.OPENTYPE,
    "opentype-variations": FontFormat.OPENTYPE,
    "otf": FontFormat.OPENTYPE,
    "truetype": FontFormat.TRUETYPE,
    "truetype-variations": FontFormat.TRUETYPE,
    "ttf": FontFormat.TRUETYPE,
    "embedded-opentype": FontFormat.EOT,
    "eot": FontFormat.EOT,
    "svg": FontFormat.SVG,
}


class FontRecord(BaseModel):
    """One discovered font source."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="File name derived from the URL, or synthesized")
    family: str = Field(..., description="Raw declared font-family")
    format: FontFormat = Field(FontFormat.UNKNOWN, description="Declared or inferred format")
    url: str = Field(..., min_length=1, description="Absolute URL or inline data payload")
    weight: str = Field("400", description="Raw font-weight value")
    style: str = Field("normal", description="Raw font-style value")
    referer: str = Field("", description="URL of the page or stylesheet that referenced it")

    @field_validator("format", mode="before")
    @classmethod
    def coerce_format(cls, v):
        if isinstance(v, str) and not isinstance(v, FontFormat):
            upper = v.strip().upper()
            if upper in FontFormat.__members__:
                return FontFormat(upper)
            return FontFormat.from_hint(v)
        return v

    @property
    def is_data_url(self) -> bool:
        return self.url.startswith(DATA_URL_PREFIX)


class InferredFontEntry(BaseModel):
    """A record as seen through its inferred family group."""

    index: int = Field(..., ge=0)
    name: str
    source_family: str
    weight: str
    style: str
    format: FontFormat
    url: str
    referer: str = ""


class FamilyGroup(BaseModel):
    """Fonts aggregated under one family fingerprint."""

    key: str = Field(..., description="Fingerprint key")
    name: str = Field(..., description="Display name")
    aliases: list[str] = Field(default_factory=list)
    files: int = Field(0, ge=0)
    variants: int = Field(0, ge=0, description="Distinct weight/style pairs")
    weights: list[str] = Field(default_factory=list)
    styles: list[str] = Field(default_factory=list)
    formats: list[str] = Field(default_factory=list)
    font_indices: list[int] = Field(default_factory=list)
    index_ranges: list[str] = Field(default_factory=list)
    fonts: list[InferredFontEntry] = Field(default_factory=list)


class SelectionCriteria(BaseModel):
    """Independent selection clauses; a record matching any active clause is selected."""

    all: bool = Field(False, description="Select every record")
    families: list[str] = Field(default_factory=list)
    names: list[str] = Field(default_factory=list)
    urls: list[str] = Field(default_factory=list)
    indices: list[int] = Field(default_factory=list)

    def has_selectors(self) -> bool:
        return bool(self.all or self.families or self.names or self.urls or self.indices)


class DownloadFailure(BaseModel):
    """A record that could not be fetched or written."""

    name: str
    url: str
    error: str

    def __str__(self) -> str:
        return f"{self.name} ({self.url}) -> {self.error}"


class DownloadReport(BaseModel):
    """Outcome of one download batch."""

    attempted: int = Field(0, ge=0)
    saved_files: list[Path] = Field(default_factory=list)
    failures: list[DownloadFailure] = Field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.saved_files)

    @property
    def failure_messages(self) -> list[str]:
        return [str(failure) for failure in self.failures]

    @property
    def all_succeeded(self) -> bool:
        return not self.failures and self.success_count == self.attempted
