# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Body collectors: inline ``<video>``/``<source>``, bare video URLs, ``data-duration``."""

from __future__ import annotations

import logging
import re

from ..context import ExtractionContext
from ..tokenizer import parse_attributes
from ..urls import to_absolute_url

logger = logging.getLogger(__name__)

_VIDEO_BLOCK_RE = re.compile(r"<video\b([^>]*)>(.*?)</video>", re.IGNORECASE | re.DOTALL)
_SOURCE_TAG_RE = re.compile(r"<source\b[^>]*>", re.IGNORECASE)
_DIRECT_VIDEO_RE = re.compile(
    r"https?://[\w.-]+(?:/[\w\-./%?=&]*)?\.(?:mp4|m3u8|webm|mov|m4v)(?:\?[^\"'\s<>]*)?",
    re.IGNORECASE | re.ASCII,
)
_DATA_DURATION_RE = re.compile(r"""data-duration\s*=\s*("[^"]*"|'[^']*')""", re.IGNORECASE)

DETECTED_VIDEO_LABEL = "Detected video"


def collect_inline_videos(html: str, ctx: ExtractionContext) -> None:
    """``<video poster src>`` and nested ``<source src type>`` tags, numbered from 1."""
    for video_index, m in enumerate(_VIDEO_BLOCK_RE.finditer(html), start=1):
        video_attrs = parse_attributes(f"<video{m.group(1)}>")

        poster = video_attrs.get("poster")
        if poster:
            ctx.add_thumbnail(to_absolute_url(ctx.page_url, poster))

        if video_attrs.get("src"):
            ctx.registry.add(video_attrs["src"], label=f"Inline video {video_index}")

        for source_index, tag in enumerate(_SOURCE_TAG_RE.findall(m.group(2)), start=1):
            source_attrs = parse_attributes(tag)
            if not source_attrs.get("src"):
                continue
            ctx.registry.add(
                source_attrs["src"],
                label=source_attrs.get("label") or f"Video source {video_index}.{source_index}",
                mime_type=source_attrs.get("type"),
            )


def collect_direct_video_urls(html: str, ctx: ExtractionContext) -> None:
    """Last resort: any absolute URL ending in a known video extension."""
    for m in _DIRECT_VIDEO_RE.finditer(html):
        ctx.registry.add(m.group(0), label=DETECTED_VIDEO_LABEL)


def collect_data_durations(html: str, ctx: ExtractionContext) -> None:
    for m in _DATA_DURATION_RE.finditer(html):
        value = m.group(1)[1:-1]
        if value and not ctx.add_duration(value):
            logger.debug("discarded data-duration: %r", value)
