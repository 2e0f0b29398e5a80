"""
Font Downloader
===============

Fetches selected font records (over HTTP or from inline payloads) and writes
them under a per-family directory with collision-safe file names.
"""

import logging
from collections.abc import Callable
from pathlib import Path

import requests

from fontgrab.core.config import DownloadConfig, HttpConfig
from fontgrab.core.exceptions import (
    DirectoryCreateError,
    FileWriteError,
    FontgrabError,
    HTTPStatusError,
    NetworkConnectionError,
    NetworkTimeoutError,
)
from fontgrab.core.models import DownloadFailure, DownloadReport, FontFormat, FontRecord
from fontgrab.discovery.extractor import create_session
from fontgrab.discovery.urls import origin_of, slugify

from .datauri import decode_data_url

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, FontRecord], None]

UNKNOWN_FAMILY_DIR = "unknown"
DEFAULT_STEM = "font"

# Substring of the response content-type -> extension, checked in order
CONTENT_TYPE_EXTENSIONS = [
    ("woff2", "woff2"),
    ("woff", "woff"),
    ("opentype", "otf"),
    ("otf", "otf"),
    ("truetype", "ttf"),
    ("ttf", "ttf"),
]


def sanitize_component(value: str) -> str:
    return slugify(value)


def family_directory(output_root: Path, font: FontRecord) -> Path:
    return output_root / (sanitize_component(font.family) or UNKNOWN_FAMILY_DIR)


def extension_for_font(
    font: FontRecord, content_type: str | None, fallback: str = "bin"
) -> str:
    """Pick an extension from the declared format, then the content-type, then ``fallback``."""
    if font.format is not FontFormat.UNKNOWN and font.format.extension:
        return font.format.extension

    if content_type:
        mime = content_type.lower()
        for needle, extension in CONTENT_TYPE_EXTENSIONS:
            if needle in mime:
                return extension

    return fallback


def file_stem_for_font(font: FontRecord) -> str:
    """``<name>-<weight>-<style>`` with every part sanitized and empty parts dropped."""
    base_name = Path(font.name).stem if font.name else ""
    parts = [sanitize_component(base_name) or DEFAULT_STEM]

    for value in (font.weight, font.style):
        normalized = sanitize_component(value)
        if normalized:
            parts.append(normalized)

    return "-".join(parts)


def unique_output_path(directory: Path, stem: str, extension: str, claimed: set[Path]) -> Path:
    """
    First ``stem[-n].extension`` in ``directory`` that neither exists on disk
    nor was claimed earlier in this batch. The chosen path is added to ``claimed``.
    """
    normalized_stem = stem or DEFAULT_STEM
    attempt = 0

    while True:
        if attempt == 0:
            file_name = f"{normalized_stem}.{extension}"
        else:
            file_name = f"{normalized_stem}-{attempt}.{extension}"

        candidate = directory / file_name
        if not candidate.exists() and candidate not in claimed:
            claimed.add(candidate)
            return candidate

        attempt += 1


class FontDownloader:
    """
    Downloads font records to disk.

    Features:
    - Inline ``data:`` payload decoding
    - Referer/Origin headers for hotlink-protected font hosts
    - Extension inference from format or content-type
    - Collision-free naming within and across runs
    - Per-record failure isolation
    """

    def __init__(
        self,
        http_config: HttpConfig | None = None,
        download_config: DownloadConfig | None = None,
        session: requests.Session | None = None,
    ):
        self.http_config = http_config or HttpConfig()
        self.config = download_config or DownloadConfig()
        self.session = session or create_session(self.http_config)

    def download_fonts(
        self,
        fonts: list[FontRecord],
        output_root: Path,
        progress_callback: ProgressCallback | None = None,
    ) -> DownloadReport:
        """
        Download every record in ``fonts`` under ``output_root``.

        Args:
            fonts: Records to fetch, in order
            output_root: Destination root directory
            progress_callback: Called with (position, total, record) before each attempt

        Returns:
            DownloadReport with saved paths and per-record failures

        Raises:
            DirectoryCreateError: If the root or a family directory cannot be
                created; no record is attempted in that case
        """
        output_root = Path(output_root)
        self._prepare_directories(fonts, output_root)

        report = DownloadReport(attempted=len(fonts))
        claimed: set[Path] = set()
        total = len(fonts)

        logger.info(f"Downloading {total} fonts into {output_root}")

        for position, font in enumerate(fonts, start=1):
            if progress_callback:
                progress_callback(position, total, font)

            try:
                saved_path = self._download_single_font(font, output_root, claimed)
            except FontgrabError as e:
                logger.warning(f"Failed to download {font.name}: {e}")
                report.failures.append(DownloadFailure(name=font.name, url=font.url, error=str(e)))
            else:
                logger.debug(f"Saved {font.name} to {saved_path}")
                report.saved_files.append(saved_path)

        logger.info(f"Downloaded {report.success_count}/{report.attempted} fonts")
        return report

    def _prepare_directories(self, fonts: list[FontRecord], output_root: Path) -> None:
        directories = [output_root]
        for font in fonts:
            directory = family_directory(output_root, font)
            if directory not in directories:
                directories.append(directory)

        for directory in directories:
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DirectoryCreateError(str(directory), str(e)) from e

    def _download_single_font(self, font: FontRecord, output_root: Path, claimed: set[Path]) -> Path:
        if font.is_data_url:
            payload = decode_data_url(font.url)
            data, content_type = payload.data, payload.media_type
        else:
            data, content_type = self._fetch_remote_font(font)

        extension = extension_for_font(font, content_type, self.config.fallback_extension)
        directory = family_directory(output_root, font)
        stem = file_stem_for_font(font)

        file_path = directory / f"{stem}.{extension}"
        try:
            file_path = unique_output_path(directory, stem, extension, claimed)
            file_path.write_bytes(data)
        except OSError as e:
            raise FileWriteError(str(file_path), str(e)) from e

        return file_path

    def _fetch_remote_font(self, font: FontRecord) -> tuple[bytes, str | None]:
        headers = {"Accept": "*/*"}
        if font.referer:
            headers["Referer"] = font.referer
            origin = origin_of(font.referer)
            if origin:
                headers["Origin"] = origin

        try:
            response = self.session.get(
                font.url, headers=headers, timeout=self.http_config.download_timeout
            )
        except requests.Timeout as e:
            raise NetworkTimeoutError(font.url) from e
        except requests.RequestException as e:
            raise NetworkConnectionError(font.url, str(e)) from e

        if not 200 <= response.status_code < 300:
            raise HTTPStatusError(font.url, response.status_code)

        return response.content, response.headers.get("Content-Type")

    def cleanup(self) -> None:
        """Cleanup downloader resources."""
        self.session.close()


def download_fonts(
    fonts: list[FontRecord],
    output_root: Path,
    progress_callback: ProgressCallback | None = None,
    http_config: HttpConfig | None = None,
    download_config: DownloadConfig | None = None,
) -> DownloadReport:
    """Run one download batch with a fresh session."""
    downloader = FontDownloader(http_config, download_config)
    try:
        return downloader.download_fonts(fonts, output_root, progress_callback)
    finally:
        downloader.cleanup()
