"""Resolution of selection criteria into record indices."""

import logging

from fontgrab.core.exceptions import EmptySelectionError, NoMatchingFontsError
from fontgrab.core.models import FontRecord, SelectionCriteria

from .grouping import normalize, select_indices_by_family_names

logger = logging.getLogger(__name__)


def select_font_indices(fonts: list[FontRecord], selection: SelectionCriteria) -> list[int]:
    """
    Ascending, deduplicated union of the indices matched by each active clause.

    Names and urls compare trimmed and case-insensitively; families match an
    inferred group's display name or any raw family alias. Indices outside
    the record list are ignored.
    """
    if selection.all:
        return list(range(len(fonts)))

    selected = {index for index in selection.indices if 0 <= index < len(fonts)}
    selected.update(select_indices_by_family_names(fonts, selection.families))

    name_set = {normalize(name) for name in selection.names}
    url_set = {normalize(url) for url in selection.urls}

    if name_set or url_set:
        for index, font in enumerate(fonts):
            if normalize(font.name) in name_set or normalize(font.url) in url_set:
                selected.add(index)

    return sorted(selected)


def resolve_selection(fonts: list[FontRecord], selection: SelectionCriteria) -> list[int]:
    """
    Resolve ``selection`` against ``fonts``.

    Raises:
        EmptySelectionError: If no clause is active
        NoMatchingFontsError: If the active clauses match nothing
    """
    if not selection.has_selectors():
        raise EmptySelectionError()

    indices = select_font_indices(fonts, selection)
    if not indices:
        raise NoMatchingFontsError()

    logger.debug(f"Selection matched {len(indices)} of {len(fonts)} fonts")
    return indices
