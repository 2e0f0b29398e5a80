"""Font Download Module
====================

Fetches selected fonts and persists them with collision-safe names.
"""

from .datauri import DecodedPayload, decode_data_url
from .downloader import FontDownloader, download_fonts
from .progress import ConsoleProgress

__all__ = [
    "ConsoleProgress",
    "DecodedPayload",
    "FontDownloader",
    "decode_data_url",
    "download_fonts",
]
