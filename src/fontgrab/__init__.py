"""Web Font Harvester
==================

Discovers the web fonts a page references, groups messy family and file
names into canonical families, and downloads selected fonts with
collision-safe names.
"""

__version__ = "0.1.0"
__author__ = "fontgrab contributors"

from .api import discover_fonts, download_fonts, select_fonts
from .core.config import AppConfig
from .core.exceptions import FontgrabError, NetworkError, NotFoundError, SelectionError
from .core.models import DownloadReport, FamilyGroup, FontFormat, FontRecord, SelectionCriteria
from .families import infer_family_groups

__all__ = [
    "AppConfig",
    "DownloadReport",
    "FamilyGroup",
    "FontFormat",
    "FontRecord",
    "FontgrabError",
    "NetworkError",
    "NotFoundError",
    "SelectionCriteria",
    "SelectionError",
    "discover_fonts",
    "download_fonts",
    "infer_family_groups",
    "select_fonts",
]
