"""Decoding of inline ``data:`` font payloads."""

import base64
import binascii
from dataclasses import dataclass
from urllib.parse import unquote_to_bytes

from fontgrab.core.exceptions import DataUrlError
from fontgrab.core.models import DATA_URL_PREFIX


@dataclass(frozen=True)
class DecodedPayload:
    data: bytes
    media_type: str | None = None


def decode_data_url(value: str) -> DecodedPayload:
    """
    Decode a ``data:[<media type>][;base64],<data>`` URL.

    Raises:
        DataUrlError: If the prefix or separator is missing or base64 is invalid
    """
    if not value.startswith(DATA_URL_PREFIX):
        raise DataUrlError("missing data: prefix")

    meta, sep, data = value[len(DATA_URL_PREFIX) :].partition(",")
    if not sep:
        raise DataUrlError("missing comma separator")

    segments = meta.split(";")
    is_base64 = any(segment.strip().lower() == "base64" for segment in segments[1:])
    media_type = segments[0].strip() or None

    if not is_base64:
        return DecodedPayload(data=unquote_to_bytes(data), media_type=media_type)

    # Stylesheets sometimes wrap long payloads across lines
    compact = "".join(data.split())
    try:
        decoded = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DataUrlError(f"failed to decode base64 font bytes: {e}") from e

    return DecodedPayload(data=decoded, media_type=media_type)
