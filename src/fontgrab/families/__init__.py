"""Family Inference Module
=======================

Fingerprints messy family and file names into canonical groups and resolves
selection criteria against them.
"""

from .fingerprint import FamilyFingerprint, infer_family_fingerprint
from .grouping import group_by_inferred_family, infer_family_groups, select_indices_by_family_names
from .selection import resolve_selection, select_font_indices

__all__ = [
    "FamilyFingerprint",
    "group_by_inferred_family",
    "infer_family_fingerprint",
    "infer_family_groups",
    "resolve_selection",
    "select_font_indices",
    "select_indices_by_family_names",
]
