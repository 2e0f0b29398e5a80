"""
Core Operations
===============

The three operations every presentation layer builds on: discover the fonts
of a site, resolve a selection against them, and download a subset.
"""

import logging
from pathlib import Path

from .core.config import AppConfig
from .core.exceptions import NoFontsFoundError
from .core.models import DownloadReport, FontRecord, SelectionCriteria
from .discovery.extractor import extract_fonts_from_url
from .discovery.urls import normalize_target
from .download.downloader import ProgressCallback
from .download.downloader import download_fonts as run_download_batch
from .families.selection import resolve_selection

logger = logging.getLogger(__name__)


def discover_fonts(site: str, config: AppConfig | None = None) -> list[FontRecord]:
    """
    Discover the web fonts referenced by ``site``.

    Args:
        site: Site reference; ``https://`` is assumed when no scheme is given
        config: Optional application configuration

    Returns:
        Ordered, url-deduplicated font records

    Raises:
        NetworkError: If the page cannot be fetched
        NoFontsFoundError: If the page references no fonts
    """
    config = config or AppConfig()
    target_url = normalize_target(site)

    fonts = extract_fonts_from_url(target_url, config.http, config.extractor)
    if not fonts:
        raise NoFontsFoundError(target_url)

    logger.debug(f"Discovered {len(fonts)} fonts on {target_url}")
    return fonts


def select_fonts(fonts: list[FontRecord], criteria: SelectionCriteria) -> list[int]:
    """
    Resolve ``criteria`` into ascending, deduplicated record indices.

    Raises:
        SelectionError: If no clause is active or nothing matched
    """
    return resolve_selection(fonts, criteria)


def download_fonts(
    fonts: list[FontRecord],
    output_dir: str | Path,
    progress: ProgressCallback | None = None,
    config: AppConfig | None = None,
) -> DownloadReport:
    """
    Download ``fonts`` under ``output_dir``.

    Failures are reported per record in the returned report; only a
    directory that cannot be created raises (StorageError).
    """
    config = config or AppConfig()
    return run_download_batch(fonts, Path(output_dir), progress, config.http, config.download)
