"""
Family Grouping
===============

Aggregates font records into inferred family groups and looks groups up by
name.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from fontgrab.core.models import FamilyGroup, FontRecord, InferredFontEntry

from .fingerprint import effective_style, effective_weight, infer_family_fingerprint

logger = logging.getLogger(__name__)


@dataclass
class FamilyAccumulator:
    """Mutable per-key state while grouping."""

    key: str
    name: str
    aliases: set[str] = field(default_factory=set)
    files: int = 0
    variant_keys: set[tuple[str, str]] = field(default_factory=set)
    weights: set[str] = field(default_factory=set)
    styles: set[str] = field(default_factory=set)
    formats: set[str] = field(default_factory=set)
    indices: list[int] = field(default_factory=list)
    fonts: list[InferredFontEntry] = field(default_factory=list)

    def add(self, index: int, font: FontRecord, weight: str, style: str) -> None:
        self.aliases.add(font.family)
        self.files += 1
        self.variant_keys.add((weight, style))
        self.weights.add(weight)
        self.styles.add(style)
        self.formats.add(font.format.value.upper())
        self.indices.append(index)
        self.fonts.append(
            InferredFontEntry(
                index=index,
                name=font.name,
                source_family=font.family,
                weight=weight,
                style=style,
                format=font.format,
                url=font.url,
                referer=font.referer,
            )
        )

    def into_group(self) -> FamilyGroup:
        indices = sorted(self.indices)
        return FamilyGroup(
            key=self.key,
            name=self.name,
            aliases=sorted(self.aliases),
            files=self.files,
            variants=len(self.variant_keys),
            weights=sorted(self.weights),
            styles=sorted(self.styles),
            formats=sorted(self.formats),
            font_indices=indices,
            index_ranges=to_index_ranges(indices),
            fonts=sorted(self.fonts, key=lambda entry: entry.index),
        )


def infer_family_groups(
    fonts: list[FontRecord], selected_indices: Iterable[int] | None = None
) -> list[FamilyGroup]:
    """
    Group records by family fingerprint.

    Args:
        fonts: Records from one discovery pass
        selected_indices: Optional subset of positions; out-of-range and
            duplicate positions are ignored. All records when None.

    Returns:
        Groups ordered by display name (case-insensitive), then key
    """
    if selected_indices is None:
        unique_indices = list(range(len(fonts)))
    else:
        unique_indices = sorted({index for index in selected_indices if 0 <= index < len(fonts)})

    grouped: dict[str, FamilyAccumulator] = {}

    for index in unique_indices:
        font = fonts[index]
        fingerprint = infer_family_fingerprint(font)
        style = effective_style(font, fingerprint.style_hint)
        weight = effective_weight(font, fingerprint.weight_hint)

        accumulator = grouped.get(fingerprint.key)
        if accumulator is None:
            accumulator = FamilyAccumulator(key=fingerprint.key, name=fingerprint.display)
            grouped[fingerprint.key] = accumulator

        accumulator.add(index, font, weight, style)

    families = [accumulator.into_group() for accumulator in grouped.values()]
    families.sort(key=lambda group: (group.name.lower(), group.key))

    logger.debug(f"Grouped {len(unique_indices)} fonts into {len(families)} families")
    return families


def group_by_inferred_family(fonts: list[FontRecord]) -> list[FamilyGroup]:
    """Group every record."""
    return infer_family_groups(fonts)


def group_matches(group: FamilyGroup, requested: set[str]) -> bool:
    """Whether any requested (normalized) name equals the display name or an alias."""
    if normalize(group.name) in requested:
        return True
    return any(normalize(alias) in requested for alias in group.aliases)


def select_indices_by_family_names(fonts: list[FontRecord], family_names: list[str]) -> list[int]:
    """Ascending indices of every record whose inferred group matches a requested name."""
    if not family_names:
        return []

    requested = {normalize(name) for name in family_names}
    selected: set[int] = set()

    for group in group_by_inferred_family(fonts):
        if group_matches(group, requested):
            selected.update(group.font_indices)

    return sorted(selected)


def to_index_ranges(indices: list[int]) -> list[str]:
    """Collapse ascending indices into ``"a-b"`` runs, e.g. [0, 1, 2, 5] -> ["0-2", "5"]."""
    if not indices:
        return []

    ranges = []
    start = previous = indices[0]

    for current in indices[1:]:
        if current == previous + 1:
            previous = current
            continue
        ranges.append(_format_index_range(start, previous))
        start = previous = current

    ranges.append(_format_index_range(start, previous))
    return ranges


def _format_index_range(start: int, end: int) -> str:
    return str(start) if start == end else f"{start}-{end}"


def normalize(value: str) -> str:
    return value.strip().lower()
