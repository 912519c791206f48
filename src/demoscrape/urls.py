# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""URL helpers: page-URL validation, absolute resolution, video-URL keys.

Every URL the collectors discover passes through here before it is compared
or stored, so relative references always end up absolute against the page.
"""

from __future__ import annotations

from urllib.parse import urljoin, urlsplit, urlunsplit

from .entities import decode_entities
from .errors import InvalidUrlError
from .models import VideoSourceType

ALLOWED_URL_SCHEMES = frozenset({"http", "https"})

_HLS_MIME_MARKERS = ("m3u8", "mpegurl")
_FILE_MIME_MARKERS = ("mp4", "webm", "quicktime")
_HLS_URL_MARKERS = (".m3u8",)
_FILE_URL_MARKERS = (".mp4", ".webm", ".mov", ".m4v")


def normalize_page_url(url: str) -> str:
    """Validate an input page URL and return its normalized absolute form.

    Scheme and host are lower-cased and an empty path becomes ``/``.
    Raises InvalidUrlError when the value is not an absolute http(s) URL.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrlError(url="")
    candidate = url.strip()
    try:
        parsed = urlsplit(candidate)
        hostname = parsed.hostname
        _ = parsed.port  # malformed ports raise ValueError
    except ValueError as e:
        raise InvalidUrlError(url=candidate) from e

    scheme = parsed.scheme.lower()
    if scheme not in ALLOWED_URL_SCHEMES or not hostname:
        raise InvalidUrlError(url=candidate)

    netloc = parsed.netloc
    host_start = netloc.rfind("@") + 1
    netloc = netloc[:host_start] + netloc[host_start:].lower()
    return urlunsplit((scheme, netloc, parsed.path or "/", parsed.query, parsed.fragment))


def to_absolute_url(base_url: str, value: str | None) -> str | None:
    """Resolve *value* against *base_url*. None when empty or unparseable."""
    if not value:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        resolved = urljoin(base_url, value)
        parts = urlsplit(resolved)
    except ValueError:
        return None
    if not parts.scheme:
        return None
    return resolved


def normalize_video_url(base_url: str, value: str | None) -> str | None:
    """Registry key for a raw video reference.

    Decode entities, resolve against the page, then collapse any remaining
    literal ``&amp;``. ``data:`` URLs and blank values yield None.
    """
    if not value:
        return None
    trimmed = value.strip()
    if not trimmed or trimmed.lower().startswith("data:"):
        return None
    absolute = to_absolute_url(base_url, decode_entities(trimmed))
    if absolute is None or absolute.lower().startswith("data:"):
        return None
    return absolute.replace("&amp;", "&")


def infer_video_type(url: str, mime_type: str | None = None) -> VideoSourceType:
    """Classify a video URL from its MIME type and URL suffix markers."""
    lowered_url = url.lower()
    lowered_mime = (mime_type or "").lower()

    if any(m in lowered_mime for m in _HLS_MIME_MARKERS) or any(m in lowered_url for m in _HLS_URL_MARKERS):
        return VideoSourceType.HLS
    if any(m in lowered_mime for m in _FILE_MIME_MARKERS) or any(m in lowered_url for m in _FILE_URL_MARKERS):
        return VideoSourceType.FILE
    return VideoSourceType.UNKNOWN
