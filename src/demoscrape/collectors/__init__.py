# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Signal collectors and the fixed order they run in.

Scalar fields keep the first non-empty candidate, so ``SCAN_ORDER`` is the
priority order: meta tags beat ``<title>``, which beats JSON-LD, which beats
the inline/regex/data-attribute scanners. Video sources merge in the
registry regardless of which collector saw them first.
"""

from __future__ import annotations

from collections.abc import Callable

from ..context import ExtractionContext
from .jsonld import collect_jsonld
from .media import collect_data_durations, collect_direct_video_urls, collect_inline_videos
from .meta import collect_canonical_link, collect_meta_tags, collect_title_tag

Collector = Callable[[str, ExtractionContext], None]

SCAN_ORDER: tuple[tuple[str, Collector], ...] = (
    ("meta", collect_meta_tags),
    ("canonical", collect_canonical_link),
    ("title", collect_title_tag),
    ("jsonld", collect_jsonld),
    ("inline_video", collect_inline_videos),
    ("direct_url", collect_direct_video_urls),
    ("data_duration", collect_data_durations),
)

__all__ = [
    "SCAN_ORDER",
    "Collector",
    "collect_canonical_link",
    "collect_data_durations",
    "collect_direct_video_urls",
    "collect_inline_videos",
    "collect_jsonld",
    "collect_meta_tags",
    "collect_title_tag",
]
