"""
Selection Tests
===============

Tests for resolving selection criteria into record indices.
"""

import pytest

from fontgrab.core.exceptions import EmptySelectionError, NoMatchingFontsError, SelectionError
from fontgrab.core.models import FontRecord, SelectionCriteria
from fontgrab.families.selection import resolve_selection, select_font_indices


@pytest.fixture
def catalog():
    """Six records where Roboto occupies indices 0-2."""
    families = ["Roboto", "Roboto", "Roboto-Italic", "Inter", "Inter", "Lora"]
    return [
        FontRecord(
            name=f"font{index}.woff2",
            family=family,
            url=f"https://cdn.example.com/font{index}.woff2",
        )
        for index, family in enumerate(families)
    ]


class TestSelectFontIndices:
    """Test clause matching."""

    def test_all(self, catalog):
        """Test the all clause selects every record."""
        assert select_font_indices(catalog, SelectionCriteria(all=True)) == [0, 1, 2, 3, 4, 5]

    def test_family_and_index_union(self, catalog):
        """Test a family clause and an index from another family combine."""
        criteria = SelectionCriteria(families=["Roboto"], indices=[5, 1])

        assert select_font_indices(catalog, criteria) == [0, 1, 2, 5]

    def test_names_and_urls_case_insensitive(self, catalog):
        """Test name and url clauses compare trimmed and case-insensitively."""
        criteria = SelectionCriteria(
            names=[" FONT3.WOFF2 "],
            urls=["HTTPS://CDN.EXAMPLE.COM/font4.woff2"],
        )

        assert select_font_indices(catalog, criteria) == [3, 4]

    def test_out_of_range_indices_ignored(self, catalog):
        """Test indices outside the record list are dropped."""
        assert select_font_indices(catalog, SelectionCriteria(indices=[-1, 6, 2])) == [2]


class TestResolveSelection:
    """Test selection resolution errors."""

    def test_empty_criteria_rejected(self, catalog):
        """Test no active clause is an error rather than an empty result."""
        with pytest.raises(EmptySelectionError):
            resolve_selection(catalog, SelectionCriteria())

    def test_no_match_rejected(self, catalog):
        """Test active clauses matching nothing raise."""
        with pytest.raises(NoMatchingFontsError):
            resolve_selection(catalog, SelectionCriteria(families=["Comic"], indices=[99]))

    def test_errors_are_selection_errors(self, catalog):
        """Test both failures share the selection error category."""
        with pytest.raises(SelectionError):
            resolve_selection(catalog, SelectionCriteria())

    def test_resolved_indices(self, catalog):
        """Test a successful resolution returns sorted unique indices."""
        criteria = SelectionCriteria(families=["inter"], names=["font3.woff2"])

        assert resolve_selection(catalog, criteria) == [3, 4]
